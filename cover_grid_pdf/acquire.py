"""
Cover image download with a primary and a backup URL.
"""

# Standard Library
import concurrent.futures
import dataclasses
import io
import threading
import typing

# PIP3 modules
import PIL.Image
import requests

# local repo modules
import cover_grid_pdf as cgp
import cover_grid_pdf.config
import cover_grid_pdf.errors


CoverSheetConfig = cgp.config.CoverSheetConfig
AcquisitionError = cgp.errors.AcquisitionError

STATUS_FOUND = "found"
STATUS_NOT_FOUND = "not_found"
STATUS_INVALID_FORMAT = "invalid_format"

# tag reported for bytes whose header PIL cannot read
FALLBACK_FORMAT_TAG = "JPG"
FORMAT_TAGS = {
	"JPEG": "JPG",
	"PNG": "PNG",
}


@dataclasses.dataclass
class FetchResult:
	identifier: str
	status: str
	data: bytes | None = None
	format_tag: str | None = None
	image_size: tuple[int, int] | None = None
	url: str | None = None
	attempts: int = 0


#============================================
def build_session(config: CoverSheetConfig) -> requests.Session:
	"""
	Build an HTTP session with the fixed browser User-Agent.

	Args:
		config: Cover sheet configuration.

	Returns:
		requests.Session.
	"""
	session = requests.Session()
	session.headers.update({"User-Agent": config.user_agent})
	return session


#============================================
def build_urls(identifier: str, config: CoverSheetConfig) -> list[str]:
	"""
	Build the primary and backup cover URLs for a product code.

	Args:
		identifier: Product code.
		config: Cover sheet configuration.

	Returns:
		List of [primary_url, backup_url].
	"""
	return [
		config.primary_url_template.format(identifier=identifier),
		config.backup_url_template.format(identifier=identifier),
	]


#============================================
def download(session: requests.Session, url: str, config: CoverSheetConfig) -> bytes:
	"""
	Download one URL and return the response body.

	Args:
		session: HTTP session.
		url: URL to fetch.
		config: Cover sheet configuration.

	Returns:
		Response body bytes.
	"""
	try:
		response = session.get(url, timeout=config.http_timeout)
		response.raise_for_status()
	except requests.RequestException as error:
		raise AcquisitionError(str(error), {"url": url}) from error
	return response.content


#============================================
def detect_format(data: bytes) -> tuple[str, tuple[int, int] | None]:
	"""
	Read the image header and classify its encoding.

	Only the header is parsed; pixel data is not decoded here.

	Args:
		data: Image bytes.

	Returns:
		Tuple of (format_tag, (width, height)). When the header cannot be
		read the tag is FALLBACK_FORMAT_TAG and the size is None.
	"""
	try:
		with PIL.Image.open(io.BytesIO(data)) as image:
			pil_format = image.format or ""
			image_size = image.size
	except (OSError, SyntaxError, ValueError):
		return (FALLBACK_FORMAT_TAG, None)
	format_tag = FORMAT_TAGS.get(pil_format.upper(), pil_format.upper())
	if not format_tag:
		format_tag = FALLBACK_FORMAT_TAG
	return (format_tag, image_size)


#============================================
def fetch_cover(session: requests.Session, identifier: str, config: CoverSheetConfig) -> FetchResult:
	"""
	Fetch the cover image for a product code.

	The primary URL is tried once, then the backup URL once.

	Args:
		session: HTTP session.
		identifier: Product code.
		config: Cover sheet configuration.

	Returns:
		FetchResult.
	"""
	attempts = 0
	for url in build_urls(identifier, config):
		attempts += 1
		try:
			data = download(session, url, config)
		except AcquisitionError:
			continue
		format_tag, image_size = detect_format(data)
		status = STATUS_FOUND
		if image_size is None:
			status = STATUS_INVALID_FORMAT
		return FetchResult(
			identifier=identifier,
			status=status,
			data=data,
			format_tag=format_tag,
			image_size=image_size,
			url=url,
			attempts=attempts,
		)
	return FetchResult(identifier=identifier, status=STATUS_NOT_FOUND, attempts=attempts)


#============================================
def iter_fetch_results(
	session: requests.Session,
	identifiers: list[str],
	config: CoverSheetConfig,
	session_factory: typing.Callable[[CoverSheetConfig], requests.Session] | None = None,
) -> typing.Iterator[FetchResult]:
	"""
	Yield fetch results in input order.

	With more than one worker, downloads run ahead in a thread pool while
	results are still handed out in the original order. Each worker thread
	uses its own session built by session_factory.

	Args:
		session: HTTP session for sequential fetching.
		identifiers: Product codes.
		config: Cover sheet configuration.
		session_factory: Builds per-thread sessions; defaults to build_session.

	Yields:
		FetchResult per identifier.
	"""
	if config.fetch_workers <= 1:
		for identifier in identifiers:
			yield fetch_cover(session, identifier, config)
		return
	if session_factory is None:
		session_factory = build_session
	local = threading.local()
	worker_sessions: list[requests.Session] = []
	sessions_lock = threading.Lock()

	def fetch_in_worker(identifier: str) -> FetchResult:
		worker_session = getattr(local, "session", None)
		if worker_session is None:
			worker_session = session_factory(config)
			local.session = worker_session
			with sessions_lock:
				worker_sessions.append(worker_session)
		return fetch_cover(worker_session, identifier, config)

	try:
		with concurrent.futures.ThreadPoolExecutor(max_workers=config.fetch_workers) as executor:
			yield from executor.map(fetch_in_worker, identifiers)
	finally:
		for worker_session in worker_sessions:
			worker_session.close()
