import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import grade_engine
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from grade_engine.core.models.questions import Question, QuestionCatalog  # noqa: E402
from grade_engine.core.policy import AssessmentPolicy  # noqa: E402
from grade_engine.store.memory import InMemoryResultStore  # noqa: E402


# Common test fixtures
@pytest.fixture
def exam_id():
    """Return a test exam id."""
    return "exam-midterm"


@pytest.fixture
def catalog(exam_id) -> QuestionCatalog:
    """Two questions worth 10 marks each."""
    return QuestionCatalog.of(exam_id, [
        Question("q1", "Explain photosynthesis", position=1, max_mark=10),
        Question("q2", "Balance the equation", position=2, max_mark=10),
    ])


@pytest.fixture
def policy() -> AssessmentPolicy:
    """Four-step policy with 'attempted poorly' worth 30%."""
    return AssessmentPolicy.from_mapping({
        "not_attempted": 0.0,
        "attempted_poorly": 0.3,
        "attempted_adequately": 0.5,
        "attempted_fully": 1.0,
    })


@pytest.fixture
def store() -> InMemoryResultStore:
    return InMemoryResultStore()
