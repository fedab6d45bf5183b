"""
Pytest configuration for lazyfile tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import io
from pathlib import Path
from typing import List

import pytest


class MockSourceStream(io.RawIOBase):
    """Non-seekable mock source that records how it is used."""
    
    def __init__(self, data: bytes, fail_after: int = -1) -> None:
        super().__init__()
        self.data = data
        self.index = 0
        self.read_calls: List[int] = []
        self.fail_after = fail_after
    
    def readable(self) -> bool:
        return True
    
    def readinto(self, buffer) -> int:
        self.read_calls.append(len(buffer))
        if 0 <= self.fail_after <= self.index:
            raise OSError("Simulated read failure")
        
        end = min(self.index + len(buffer), len(self.data))
        if 0 <= self.fail_after < end:
            end = self.fail_after
        chunk = self.data[self.index:end]
        buffer[:len(chunk)] = chunk
        self.index = end
        return len(chunk)


@pytest.fixture
def mock_source():
    """Create a mock source stream for testing."""
    def _create_source(data: bytes, fail_after: int = -1) -> MockSourceStream:
        return MockSourceStream(data, fail_after)
    return _create_source


@pytest.fixture
def sample_data() -> bytes:
    """Sample stream data for testing."""
    return b"Hello, World!"


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """A 10 byte file supplied by the caller."""
    path = tmp_path / "sample.bin"
    path.write_bytes(b"0123456789")
    return path


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Empty directory for temporary backing files."""
    path = tmp_path / "spool"
    path.mkdir()
    return path
