"""
data/topics.py — JEE topic catalogue used for question generation.
Static reference data; never mutated.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

SubjectName = Literal["Physics", "Chemistry", "Mathematics"]
SUBJECTS: tuple[str, ...] = ("Physics", "Chemistry", "Mathematics")


class Topic(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    subject: SubjectName


JEE_TOPICS: List[Topic] = [
    # Physics
    Topic(id="mechanics", name="Mechanics", subject="Physics"),
    Topic(id="thermodynamics", name="Thermodynamics", subject="Physics"),
    Topic(id="waves", name="Waves and Oscillations", subject="Physics"),
    Topic(id="electromagnetism", name="Electromagnetism", subject="Physics"),
    Topic(id="optics", name="Optics", subject="Physics"),
    Topic(id="modern_physics", name="Modern Physics", subject="Physics"),

    # Chemistry
    Topic(id="physical_chemistry", name="Physical Chemistry", subject="Chemistry"),
    Topic(id="organic_chemistry", name="Organic Chemistry", subject="Chemistry"),
    Topic(id="inorganic_chemistry", name="Inorganic Chemistry", subject="Chemistry"),
    Topic(id="atomic_structure", name="Atomic Structure", subject="Chemistry"),
    Topic(id="chemical_bonding", name="Chemical Bonding", subject="Chemistry"),
    Topic(id="thermochemistry", name="Thermochemistry", subject="Chemistry"),

    # Mathematics
    Topic(id="algebra", name="Algebra", subject="Mathematics"),
    Topic(id="calculus", name="Calculus", subject="Mathematics"),
    Topic(id="coordinate_geometry", name="Coordinate Geometry", subject="Mathematics"),
    Topic(id="trigonometry", name="Trigonometry", subject="Mathematics"),
    Topic(id="probability", name="Probability and Statistics", subject="Mathematics"),
    Topic(id="vectors", name="Vectors and 3D Geometry", subject="Mathematics"),
]

_BY_ID: Dict[str, Topic] = {t.id: t for t in JEE_TOPICS}


def get_topic(topic_id: str) -> Optional[Topic]:
    return _BY_ID.get(topic_id)


def topics_by_subject() -> Dict[str, List[Topic]]:
    """Catalogue grouped by subject, in the fixed Physics/Chemistry/Mathematics order."""
    grouped: Dict[str, List[Topic]] = {s: [] for s in SUBJECTS}
    for t in JEE_TOPICS:
        grouped[t.subject].append(t)
    return grouped


def resolve_topics(topic_ids) -> List[Topic]:
    """Topic ids → Topic objects in catalogue order. Unknown ids are dropped."""
    wanted = set(topic_ids)
    return [t for t in JEE_TOPICS if t.id in wanted]
