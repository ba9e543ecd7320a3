"""
Pytest configuration and fixtures for ssync tests.
"""

import shutil
import sys
import tempfile
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ssync.core.models import SyncInvocation, SyncResult  # noqa: E402


class RecordingExecutor:
    """Stands in for SyncExecutor and records every invocation."""

    def __init__(self, success: bool = True, delay: float = 0.0) -> None:
        self.success = success
        self.delay = delay
        self.invocations: list[SyncInvocation] = []
        self.called = threading.Event()
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self.invocations)

    def run(self, invocation: SyncInvocation) -> SyncResult:
        if self.delay:
            threading.Event().wait(self.delay)
        with self._lock:
            self.invocations.append(invocation)
        self.called.set()
        return SyncResult(
            success=self.success,
            command=["rsync", invocation.source, invocation.destination],
            returncode=0 if self.success else 23,
            error=None if self.success else "rsync exited with status 23",
        )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def home_dir(temp_dir: Path) -> Path:
    """A fake home directory containing a project directory."""
    project = temp_dir / "home" / "user" / "src" / "app"
    project.mkdir(parents=True)
    return temp_dir / "home" / "user"


@pytest.fixture
def project_dir(home_dir: Path) -> Path:
    return home_dir / "src" / "app"


@pytest.fixture
def recording_executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def failing_executor() -> RecordingExecutor:
    return RecordingExecutor(success=False)


@pytest.fixture
def rsync_path() -> str:
    path = shutil.which("rsync")
    if path is None:
        pytest.skip("rsync not installed")
    return path


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


@pytest.fixture
def make_executor() -> type[RecordingExecutor]:
    """Factory for executors with custom outcome or duration."""
    return RecordingExecutor
