"""
Pytest configuration for local imports and shared test doubles.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import pytest
import requests

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


class FakeResponse:
	def __init__(self, url: str, status_code: int, content: bytes):
		self.url = url
		self.status_code = status_code
		self.content = content

	def raise_for_status(self) -> None:
		if not 200 <= self.status_code < 300:
			raise requests.HTTPError(f"{self.status_code} for url: {self.url}", response=self)


class FakeSession:
	"""
	Stand-in for requests.Session serving canned responses by URL.

	Values in routes are bytes (served with 200), an int status code, or an
	exception instance to raise. Unknown URLs return 404.
	"""

	def __init__(self, routes: dict | None = None):
		self.routes = dict(routes or {})
		self.calls: list[tuple[str, float | None]] = []
		self.headers: dict[str, str] = {}
		self.closed = False

	def get(self, url: str, timeout: float | None = None) -> FakeResponse:
		self.calls.append((url, timeout))
		value = self.routes.get(url, 404)
		if isinstance(value, BaseException):
			raise value
		if isinstance(value, int):
			return FakeResponse(url, value, b"")
		return FakeResponse(url, 200, value)

	def close(self) -> None:
		self.closed = True

	@property
	def urls(self) -> list[str]:
		return [url for url, _timeout in self.calls]


class RecordingCanvas:
	"""
	Canvas double that records every drawing call by name.
	"""

	def __init__(self):
		self.calls: list[tuple[str, tuple, dict]] = []

	def __getattr__(self, name: str):
		def record(*args, **kwargs):
			self.calls.append((name, args, kwargs))
		return record

	def named(self, name: str) -> list[tuple[tuple, dict]]:
		return [(args, kwargs) for call_name, args, kwargs in self.calls if call_name == name]


#============================================
def make_image_bytes(width: int, height: int, image_format: str = "PNG") -> bytes:
	"""
	Build an in-memory image of the given size and format.
	"""
	image = PIL.Image.new("RGB", (width, height), (200, 40, 40))
	buffer = io.BytesIO()
	image.save(buffer, format=image_format)
	return buffer.getvalue()


@pytest.fixture
def fake_session():
	return FakeSession


@pytest.fixture
def recording_canvas():
	return RecordingCanvas()


@pytest.fixture
def image_bytes():
	return make_image_bytes
