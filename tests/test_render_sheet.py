import json
import pathlib

import pypdf
import pytest

import cover_grid_pdf.acquire
import cover_grid_pdf.config
import cover_grid_pdf.errors
import cover_grid_pdf.layout
import cover_grid_pdf.render


PRIMARY = "https://i.dr.com.tr/cache/500x400-0/originals/{}-1.jpg"
BACKUP = "https://i.dr.com.tr/cache/500x400-0/originals/{}.jpg"


#============================================
def build_config() -> cover_grid_pdf.config.CoverSheetConfig:
	return cover_grid_pdf.config.CoverSheetConfig(verbose=False)


#============================================
def found_result(identifier: str, data: bytes) -> cover_grid_pdf.acquire.FetchResult:
	format_tag, image_size = cover_grid_pdf.acquire.detect_format(data)
	return cover_grid_pdf.acquire.FetchResult(
		identifier=identifier,
		status=cover_grid_pdf.acquire.STATUS_FOUND,
		data=data,
		format_tag=format_tag,
		image_size=image_size,
		url=PRIMARY.format(identifier),
		attempts=1,
	)


#============================================
def missing_result(identifier: str) -> cover_grid_pdf.acquire.FetchResult:
	return cover_grid_pdf.acquire.FetchResult(
		identifier=identifier,
		status=cover_grid_pdf.acquire.STATUS_NOT_FOUND,
		attempts=2,
	)


#============================================
def test_two_items_side_by_side(recording_canvas, image_bytes) -> None:
	"""
	A 1x2 grid puts two cells side by side on a single page.
	"""
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("1x2")
	results = [found_result("1", image_bytes(50, 80)), found_result("2", image_bytes(80, 50))]
	sheet = cover_grid_pdf.render.draw_cover_sheet(recording_canvas, ["1", "2"], results, grid, config)

	assert sheet.pages == 1
	assert sheet.found == 2
	assert recording_canvas.named("showPage") == []

	cell_width, _cell_height = cover_grid_pdf.layout.cell_size(grid, config)
	first = cover_grid_pdf.layout.compute_cell_geometry(0, grid, config)
	second = cover_grid_pdf.layout.compute_cell_geometry(1, grid, config)
	assert first.x == pytest.approx(config.margin_x)
	assert second.x == pytest.approx(config.margin_x + cell_width)

	rects = recording_canvas.named("rect")
	assert len(rects) == 2
	assert rects[0][0][0] == pytest.approx(config.margin_x + config.border_inset)
	assert rects[1][0][0] == pytest.approx(config.margin_x + cell_width + config.border_inset)
	assert len(recording_canvas.named("drawImage")) == 2


#============================================
def test_page_breaks_on_wrap(recording_canvas) -> None:
	"""
	showPage is called once per wrap, never before the first item.
	"""
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("2x2")
	identifiers = [str(number) for number in range(9)]
	results = [missing_result(identifier) for identifier in identifiers]
	sheet = cover_grid_pdf.render.draw_cover_sheet(recording_canvas, identifiers, results, grid, config)
	assert sheet.pages == 3
	assert len(recording_canvas.named("showPage")) == 2
	assert [item["page"] for item in sheet.items] == [0, 0, 0, 0, 1, 1, 1, 1, 2]


#============================================
def test_not_found_placeholder_and_caption(recording_canvas) -> None:
	"""
	Missing covers draw NOT FOUND plus the product code.
	"""
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("1x1")
	cell = cover_grid_pdf.layout.compute_cell_geometry(0, grid, config)
	status = cover_grid_pdf.render.draw_item(recording_canvas, cell, missing_result("98765"), config)
	assert status == cover_grid_pdf.acquire.STATUS_NOT_FOUND
	texts = [args[2] for args, _kwargs in recording_canvas.named("drawCentredString")]
	assert texts == ["NOT FOUND", "98765"]
	fonts = [args[0] for args, _kwargs in recording_canvas.named("setFont")]
	assert fonts == [config.font_bold, config.font_regular]
	assert recording_canvas.named("drawImage") == []
	# caption sits below the centered label
	label_y = recording_canvas.named("drawCentredString")[0][0][1]
	caption_y = recording_canvas.named("drawCentredString")[1][0][1]
	assert caption_y < label_y


#============================================
def test_invalid_format_placeholder(recording_canvas) -> None:
	"""
	Undecodable bytes draw INVALID FORMAT and no image.
	"""
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("1x1")
	cell = cover_grid_pdf.layout.compute_cell_geometry(0, grid, config)
	fetch_result = cover_grid_pdf.acquire.FetchResult(
		identifier="5",
		status=cover_grid_pdf.acquire.STATUS_INVALID_FORMAT,
		data=b"garbage",
		format_tag=cover_grid_pdf.acquire.FALLBACK_FORMAT_TAG,
		attempts=1,
	)
	status = cover_grid_pdf.render.draw_item(recording_canvas, cell, fetch_result, config)
	assert status == cover_grid_pdf.acquire.STATUS_INVALID_FORMAT
	texts = [args[2] for args, _kwargs in recording_canvas.named("drawCentredString")]
	assert texts == ["INVALID FORMAT"]
	assert recording_canvas.named("drawImage") == []
	assert len(recording_canvas.named("rect")) == 1


#============================================
def test_pixel_decode_failure_falls_back(recording_canvas, image_bytes, monkeypatch) -> None:
	"""
	A readable header with broken pixel data still gets a placeholder.
	"""
	def broken_loader(data: bytes):
		raise OSError("image file is truncated")

	monkeypatch.setattr(cover_grid_pdf.render, "load_image_reader", broken_loader)
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("1x1")
	cell = cover_grid_pdf.layout.compute_cell_geometry(0, grid, config)
	status = cover_grid_pdf.render.draw_item(recording_canvas, cell, found_result("6", image_bytes(10, 10)), config)
	assert status == cover_grid_pdf.acquire.STATUS_INVALID_FORMAT
	texts = [args[2] for args, _kwargs in recording_canvas.named("drawCentredString")]
	assert texts == ["INVALID FORMAT"]


#============================================
def test_image_placed_at_fit_rectangle(recording_canvas, image_bytes) -> None:
	"""
	drawImage receives the fit rectangle in ReportLab coordinates.
	"""
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("3x6")
	cell = cover_grid_pdf.layout.compute_cell_geometry(7, grid, config)
	cover_grid_pdf.render.draw_item(recording_canvas, cell, found_result("7", image_bytes(400, 600)), config)
	fit = cover_grid_pdf.layout.compute_fit_rectangle(cell, 400, 600, config.content_padding)
	(args, kwargs), = recording_canvas.named("drawImage")
	assert args[1] == pytest.approx(fit.x)
	assert args[2] == pytest.approx(config.page_height - fit.y - fit.height)
	assert kwargs["width"] == pytest.approx(fit.width)
	assert kwargs["height"] == pytest.approx(fit.height)


#============================================
def test_render_pdf_end_to_end(tmp_path: pathlib.Path, fake_session, image_bytes) -> None:
	"""
	Render a real PDF with mixed outcomes and count its pages.
	"""
	routes = {
		PRIMARY.format("1"): image_bytes(60, 90, "JPEG"),
		BACKUP.format("2"): image_bytes(90, 60, "PNG"),
		PRIMARY.format("4"): b"not an image",
	}
	session = fake_session(routes)
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("1x2")
	output_path = tmp_path / "books.pdf"
	identifiers = ["1", "2", "3", "4", "1"]
	sheet = cover_grid_pdf.render.render_cover_sheet(identifiers, output_path, grid, config, session)

	assert output_path.exists()
	assert output_path.stat().st_size > 0
	reader = pypdf.PdfReader(str(output_path))
	assert len(reader.pages) == 3
	assert sheet.pages == 3
	assert sheet.found == 3
	assert sheet.not_found == 1
	assert sheet.invalid_format == 1
	page_width = float(reader.pages[0].mediabox.width)
	page_height = float(reader.pages[0].mediabox.height)
	assert page_width > page_height

	manifest_path = tmp_path / "books.json"
	cover_grid_pdf.render.write_manifest(manifest_path, sheet, grid, config)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["pages"] == 3
	assert [item["status"] for item in data["items"]] == [
		"found", "found", "not_found", "invalid_format", "found",
	]
	assert data["items"][1]["url"] == BACKUP.format("2")
	assert data["layout"]["columns"] == 2


#============================================
def test_render_output_write_error(tmp_path: pathlib.Path, fake_session) -> None:
	"""
	A failed save raises OutputWriteError after drawing.
	"""
	config = build_config()
	grid = cover_grid_pdf.config.parse_grid_size("1x1")
	output_path = tmp_path / "missing_dir" / "out.pdf"
	with pytest.raises(cover_grid_pdf.errors.OutputWriteError):
		cover_grid_pdf.render.render_cover_sheet(["1"], output_path, grid, config, fake_session())
