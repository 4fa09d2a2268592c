import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import curriculum_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from curriculum_toolkit.core.models import HierarchySource, Objective, Subtopic, Topic
from curriculum_toolkit.selection import normalize


def make_objective(obj_id: str, minutes: int, **kwargs) -> Objective:
    """Objective whose code defaults to its id."""
    kwargs.setdefault("code", obj_id)
    kwargs.setdefault("statement", f"Objective {obj_id}")
    return Objective(id=obj_id, estimated_teaching_minutes=minutes, **kwargs)


# Common test fixtures
@pytest.fixture
def single_source() -> HierarchySource:
    """One source, T1 -> S1 -> O1 (20 min), O2 (50 min)."""
    subtopic = Subtopic("S1", "States of matter", objectives=(
        make_objective("O1", 20),
        make_objective("O2", 50),
    ))
    topic = Topic("T1", "Particles", subtopics=(subtopic,), duration_minutes=240, source_id="igcse")
    return HierarchySource("igcse", topics=(topic,), name="IGCSE")


@pytest.fixture
def single_index(single_source):
    return normalize([single_source])


@pytest.fixture
def two_sources() -> list:
    """
    Source A: TA -> SA1 (O1 30, O2 30), SA2 (O3 45)
    Source B: TB -> SB1 (O4 60, O5 15), SB2 (O6 90)
    """
    topic_a = Topic("TA", "Atomic structure", source_id="A", duration_minutes=120, subtopics=(
        Subtopic("SA1", "Atoms", objectives=(make_objective("O1", 30), make_objective("O2", 30))),
        Subtopic("SA2", "Isotopes", objectives=(make_objective("O3", 45),)),
    ))
    topic_b = Topic("TB", "Bonding", source_id="B", duration_minutes=180, subtopics=(
        Subtopic("SB1", "Ionic bonding", objectives=(make_objective("O4", 60), make_objective("O5", 15))),
        Subtopic("SB2", "Covalent bonding", objectives=(make_objective("O6", 90),)),
    ))
    return [
        HierarchySource("A", topics=(topic_a,)),
        HierarchySource("B", topics=(topic_b,)),
    ]


@pytest.fixture
def two_index(two_sources):
    return normalize(two_sources)


@pytest.fixture
def payload() -> dict:
    """Hierarchy payload in the external JSON shape."""
    return {
        "name": "IGCSE Chemistry",
        "topics": [
            {
                "id": 1,
                "name": "Principles of chemistry",
                "description": "States of matter and atomic structure",
                "specificationCode": "1",
                "timeAllocation": 4,
                "subtopics": [
                    {
                        "id": "1a",
                        "name": "States of matter",
                        "practicalWork": ["Investigate diffusion"],
                        "objectives": [
                            {
                                "id": "1.1",
                                "code": "1.1",
                                "statement": "Understand the three states of matter",
                                "bloomsLevel": "understand",
                                "difficulty": "basic",
                                "estimatedTeachingMinutes": 45,
                                "keywords": ["solid", "liquid", "gas"],
                                "commandWords": ["describe"],
                                "assessmentWeight": 3,
                            },
                            {
                                "id": "1.2",
                                "code": "1.2",
                                "statement": "Explain diffusion experiments",
                                "bloomsLevel": "apply",
                                "difficulty": "intermediate",
                                "estimatedTeachingMinutes": 60,
                                "prerequisiteObjectives": ["1.1"],
                            },
                        ],
                    }
                ],
            }
        ],
    }
