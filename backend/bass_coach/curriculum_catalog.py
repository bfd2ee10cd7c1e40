"""Authored bass curriculum: lesson templates in teaching order."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Literal, Optional, Sequence, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field


class LessonCategory(str, Enum):
    """Closed set of practice categories. Aggregations iterate it in this order."""

    TECHNIQUE = "Technique"
    THEORY = "Theory"
    REPERTOIRE = "Repertoire"
    EAR_TRAINING = "Ear-Training"
    IMPROVISATION = "Improvisation"
    RHYTHM = "Rhythm"


SkillKey = Literal[
    "holding_posture",
    "tuning",
    "alternate_plucking",
    "raking",
    "floating_thumb",
    "shifting",
    "hammer_pull",
    "notes_first_5_frets",
    "major_scale_shape",
    "intervals_basic",
    "slap_basic",
    "tapping",
    "chords",
]

SKILL_KEYS: Tuple[str, ...] = get_args(SkillKey)


class LessonTemplate(BaseModel):
    """Single authored lesson. The title is its identity within the catalog."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    category: LessonCategory = LessonCategory.TECHNIQUE
    duration_minutes: int = Field(default=20, ge=1)
    min_strings: Optional[int] = Field(default=None, ge=4, le=6)
    # Not restricted to SkillKey: "rhythm" gates a lesson but is not a
    # learner-selectable skill, so that lesson can never be filtered out.
    required_skill: Optional[str] = None


def _lesson(
    title: str,
    category: LessonCategory,
    minutes: int,
    description: str,
    *,
    min_strings: Optional[int] = None,
    required_skill: Optional[str] = None,
) -> LessonTemplate:
    return LessonTemplate(
        title=title,
        description=description,
        category=category,
        duration_minutes=minutes,
        min_strings=min_strings,
        required_skill=required_skill,
    )


_T = LessonCategory

CATALOG: Tuple[LessonTemplate, ...] = (
    # Phase 1: fundamentals
    _lesson("Posture & Main Droite", _T.TECHNIQUE, 15, "Position assise/debout, sangle. Alternance index/majeur stricte.", required_skill="holding_posture"),
    _lesson("Muting Main Gauche", _T.TECHNIQUE, 15, "Utiliser les doigts inactifs pour étouffer les cordes."),
    _lesson("Le Métronome: Temps 1 & 3", _T.RHYTHM, 20, "Jouer des noires. Sentir le click sur 1 et 3.", required_skill="rhythm"),
    _lesson("Notes: Cordes à vide & Case 5", _T.THEORY, 10, "Relation entre la 5ème case et la corde suivante."),
    _lesson("Technique de l'Araignée (Chromatique)", _T.TECHNIQUE, 20, "1 doigt par case. Focus sur l'indépendance."),
    _lesson("Notes: Cases 0 à 5 (E & A)", _T.THEORY, 15, "Nommer et jouer les notes naturelles.", required_skill="notes_first_5_frets"),
    _lesson("Raking (Main Droite)", _T.TECHNIQUE, 15, "Glisser le doigt d'une corde aiguë vers une grave.", required_skill="raking"),
    _lesson("Groove: La note noire", _T.REPERTOIRE, 20, "Créer un groove simple en utilisant uniquement des noires."),
    _lesson("Gamme Majeure (Doigté 1)", _T.THEORY, 20, "Pattern 1 (Majeur doigt 2).", required_skill="major_scale_shape"),
    _lesson("Octaves", _T.TECHNIQUE, 15, "Forme géométrique de l'octave. Application disco/funk."),
    # Phase 2: intermediate techniques
    _lesson("Hammer-on & Pull-off", _T.TECHNIQUE, 20, "Legato pour fluidifier le jeu.", required_skill="hammer_pull"),
    _lesson("Subdivisions: Croches", _T.RHYTHM, 15, "Straight vs Shuffle feel."),
    _lesson("Triades Majeures", _T.THEORY, 20, "R-3-5. Arpèges sur tout le manche."),
    _lesson("Triades Mineures", _T.THEORY, 20, "R-b3-5. Comparaison avec Majeur."),
    _lesson("Floating Thumb (5+ cordes)", _T.TECHNIQUE, 25, "Le pouce suit la main pour muter les graves.", min_strings=5, required_skill="floating_thumb"),
    _lesson("Notes: Corde de Si Grave", _T.THEORY, 15, "Identifier les notes sous la 5ème case.", min_strings=5),
    _lesson("Ghost Notes (Notes mortes)", _T.TECHNIQUE, 20, "Percussion main gauche. Le son 'Tchick'."),
    _lesson("Gamme Pentatonique Mineure", _T.THEORY, 20, "La caisse à outils du rock et de la pop."),
    _lesson("Slap: Le Thumb (Pouce)", _T.TECHNIQUE, 20, "Technique de rebond contre la frette.", required_skill="slap_basic"),
    _lesson("Slap: Le Pop (Tir)", _T.TECHNIQUE, 20, "Tirer la corde (octaves) avec l'index.", required_skill="slap_basic"),
    _lesson("Groove: Syncopes", _T.RHYTHM, 20, "Accentuer les 'et' (contre-temps)."),
    _lesson("Slides (Glissés)", _T.TECHNIQUE, 15, "Glissés précis vers une note cible."),
    # Phase 3: advanced and musicality
    _lesson("Modes: Dorien", _T.THEORY, 20, "La couleur mineure 'funky'. (R 2 b3 4 5 6 b7)"),
    _lesson("Modes: Mixolydien", _T.THEORY, 20, "La couleur Dominante (Blues/Rock). (R 2 3 4 5 6 b7)"),
    _lesson("Doublettes (16ème de notes)", _T.RHYTHM, 20, "Rocco Prestia style mute."),
    _lesson("Accords: Shell Voicings", _T.THEORY, 25, "Jouer R-3-7 pour accompagner.", required_skill="chords"),
    _lesson("Accords: Power Chords", _T.THEORY, 15, "R-5-R. Utilisation rock/metal."),
    _lesson("Walking Bass: Approche Chromatique", _T.IMPROVISATION, 25, "Cibler les notes de l'accord par demi-ton."),
    _lesson("Accords 6 cordes (Voicings C aiguë)", _T.THEORY, 25, "Accords riches avec la corde de Do.", min_strings=6),
    _lesson("Tapping: Une main", _T.TECHNIQUE, 20, "Hammer-on depuis le néant.", required_skill="tapping"),
    _lesson("Ear Training: 4te et 5te", _T.EAR_TRAINING, 15, "Reconnaître les mouvements I-IV et I-V."),
    # Phase 4: virtuosity and integration
    _lesson("Double Thumping (Victor Wooten)", _T.TECHNIQUE, 30, "Pouce aller-retour comme un médiator."),
    _lesson("Sweeping Bass", _T.TECHNIQUE, 25, "Arpèges rapides sur plusieurs cordes."),
    _lesson("Harmoniques Naturelles", _T.TECHNIQUE, 15, "Cases 5, 7, 12. Jaco style."),
    _lesson("Soloing: Phrasé", _T.IMPROVISATION, 30, "Questions / Réponses. Laisser de l'espace."),
    _lesson("Étude de Style: Motown", _T.REPERTOIRE, 30, "Analyse James Jamerson. Chromatisme."),
    _lesson("Étude de Style: Reggae", _T.REPERTOIRE, 30, "Le 'One Drop'. Son lourd, peu de notes."),
    _lesson("Palm Mute", _T.TECHNIQUE, 15, "Étouffer au chevalet pour un son vintage."),
    _lesson("Analyse: Donna Lee (Intro)", _T.REPERTOIRE, 30, "Bebop head. Défi technique."),
)


def ensure_unique_titles(catalog: Sequence[LessonTemplate]) -> None:
    """Raise ``ValueError`` when two templates share a title."""
    seen: Dict[str, int] = {}
    for position, template in enumerate(catalog):
        if template.title in seen:
            raise ValueError(
                f"Duplicate lesson title '{template.title}' at positions {seen[template.title]} and {position}."
            )
        seen[template.title] = position


ensure_unique_titles(CATALOG)

__all__ = [
    "CATALOG",
    "LessonCategory",
    "LessonTemplate",
    "SKILL_KEYS",
    "SkillKey",
    "ensure_unique_titles",
]
