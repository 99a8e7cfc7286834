"""
CLI entry points for cover grid PDF generation.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# local repo modules
import cover_grid_pdf as cgp
import cover_grid_pdf.config
import cover_grid_pdf.errors
import cover_grid_pdf.identifiers
import cover_grid_pdf.render


CoverSheetConfig = cgp.config.CoverSheetConfig
CoverGridError = cgp.errors.CoverGridError
ConfigurationError = cgp.errors.ConfigurationError
NoValidIdentifiersError = cgp.errors.NoValidIdentifiersError
InputReadError = cgp.errors.InputReadError

DEFAULT_GRID_SIZE = cgp.config.DEFAULT_GRID_SIZE
DEFAULT_OUTPUT_NAME = cgp.config.DEFAULT_OUTPUT_NAME
OUTPUT_SUFFIX = cgp.config.OUTPUT_SUFFIX
HTTP_TIMEOUT = cgp.config.HTTP_TIMEOUT
DEFAULT_FETCH_WORKERS = cgp.config.DEFAULT_FETCH_WORKERS

EPILOG = """\
Details:
  - Output: Input filename is reused with .pdf extension.
  - Stdin: When no file argument is provided, reads stdin and writes output.pdf.
  - Text: All strings are converted to ASCII for PDF rendering.
  - Comments: Lines starting with '#' are ignored.

Examples:
  covers_to_pdf.py books.txt       -> books.pdf
  cat links.txt | covers_to_pdf.py -> output.pdf
"""


#============================================
def build_config(args: argparse.Namespace) -> CoverSheetConfig:
	"""
	Build cover sheet config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		CoverSheetConfig.
	"""
	if not args.timeout > 0:
		raise ConfigurationError("timeout must be positive", {"timeout": args.timeout})
	if args.workers < 1:
		raise ConfigurationError("workers must be at least 1", {"workers": args.workers})
	return CoverSheetConfig(
		http_timeout=args.timeout,
		fetch_workers=args.workers,
	)


#============================================
def resolve_output_path(input_path: str | None, output_path: str | None) -> pathlib.Path:
	"""
	Pick the output PDF path.

	Args:
		input_path: Input file path, or None for stdin.
		output_path: Explicit output path, or None.

	Returns:
		Output path.
	"""
	if output_path:
		return pathlib.Path(output_path)
	if input_path is None:
		return pathlib.Path(DEFAULT_OUTPUT_NAME)
	return pathlib.Path(input_path).with_suffix(OUTPUT_SUFFIX)


#============================================
def load_identifiers(input_path: str | None) -> list[str]:
	"""
	Read product codes from a file or stdin.

	Args:
		input_path: Input file path, or None for stdin.

	Returns:
		List of product codes.
	"""
	if input_path is None:
		if sys.stdin.isatty():
			print("Awaiting stdin input... (CTRL+D to finish)")
		# codes are ASCII digits, so undecodable bytes are replaced
		if hasattr(sys.stdin, "reconfigure"):
			sys.stdin.reconfigure(encoding="utf-8", errors="replace")
		identifiers = cgp.identifiers.read_identifiers(sys.stdin)
	else:
		try:
			handle = open(input_path, "r", encoding="utf-8", errors="replace")
		except OSError as error:
			raise InputReadError(f"unable to open file: {error}", {"path": input_path}) from error
		with handle:
			identifiers = cgp.identifiers.read_identifiers(handle)
	if not identifiers:
		raise NoValidIdentifiersError("No valid product code detected.")
	return identifiers


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(
		description="Download D&R cover images and render them on an A4 PDF grid.",
		epilog=EPILOG,
		formatter_class=argparse.RawDescriptionHelpFormatter,
	)
	parser.add_argument("input_path", nargs="?", default=None, help="Text file with product codes or links.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"-s", "--size", dest="size", default=DEFAULT_GRID_SIZE,
		help=f"Grid size as rowxcol (default {DEFAULT_GRID_SIZE}).",
	)

	network_group = parser.add_argument_group("Network")
	network_group.add_argument(
		"-t", "--timeout", dest="timeout", type=float, default=HTTP_TIMEOUT,
		help="HTTP timeout in seconds.",
	)
	network_group.add_argument(
		"-w", "--workers", dest="workers", type=int, default=DEFAULT_FETCH_WORKERS,
		help="Parallel download workers (drawing stays in input order).",
	)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> pathlib.Path:
	"""
	Run the full pipeline from input lines to the output PDF.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Output PDF path.
	"""
	grid = cgp.config.parse_grid_size(args.size)
	config = build_config(args)

	identifiers = load_identifiers(args.input_path)
	source_name = args.input_path or "stdin"
	output_path = resolve_output_path(args.input_path, args.output_path)
	print(f"Source: {source_name} | Target: {output_path} | {len(identifiers)} codes will be processed.")
	print(f"Grid: {grid.rows}x{grid.columns}")

	start_time = time.perf_counter()
	result = cgp.render.render_cover_sheet(identifiers, output_path, grid, config)
	total_time = time.perf_counter() - start_time
	print(f"Pages written: {result.pages}")
	print(f"Covers found: {result.found}")
	print(f"Covers not found: {result.not_found}")
	print(f"Invalid formats: {result.invalid_format}")
	print(f"Timing: total={total_time:.2f}s")

	if args.manifest_path:
		cgp.render.write_manifest(pathlib.Path(args.manifest_path), result, grid, config)
		print(f"Manifest written: {args.manifest_path}")
	return output_path


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		output_path = run_pipeline(args)
	except NoValidIdentifiersError as error:
		print(error.message)
		raise SystemExit(1)
	except CoverGridError as error:
		print(f"{type(error).__name__}: {error.message}")
		raise SystemExit(1)
	print(f"Success! File saved: {output_path}")
