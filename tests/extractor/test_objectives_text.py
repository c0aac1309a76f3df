"""
Unit Tests for Objective Extraction

Tests for parse_objectives_text, ExtractionConfig and the PyMuPDF text
reader (PDFs are generated in the test).
"""

import json

import fitz
import pytest

from exam_toolkit.common.objectives import StaticObjectiveCatalog
from exam_toolkit.core.models import ObjectiveMeta
from exam_toolkit.extractor import (
    ExtractionConfig,
    ExtractionError,
    extract_objectives_pdf,
    extract_pdf_text,
    parse_objectives_text,
    write_objectives_json,
)

SAMPLE_TEXT = """\
CompTIA A+ Core 2 Exam Objectives
1.0 Operating Systems
1.3
Given a scenario, use Microsoft Windows
settings and control panel utilities.
• Event Viewer
• Disk Management
− Volumes
1.4
Given a scenario, use Windows command-line tools.
• ipconfig • ping
2.0 Security | Hardening
2.4
Summarize malware types.
• Ransomware
"""


class TestParseObjectivesText:
    """Tests for parse_objectives_text."""

    def test_parse_when_sample_then_ids_in_document_order(self):
        objectives = parse_objectives_text(SAMPLE_TEXT)

        assert list(objectives) == ["1.3", "1.4", "2.4"]

    def test_parse_when_title_wraps_then_joined(self):
        objectives = parse_objectives_text(SAMPLE_TEXT)

        assert objectives["1.3"].title == (
            "Given a scenario, use Microsoft Windows settings and control panel utilities."
        )

    def test_parse_when_bullets_and_sub_bullets_then_all_bullets(self):
        objectives = parse_objectives_text(SAMPLE_TEXT)

        assert objectives["1.3"].bullets == ("Event Viewer", "Disk Management", "Volumes")

    def test_parse_when_inline_bullets_then_split(self):
        objectives = parse_objectives_text(SAMPLE_TEXT)

        assert objectives["1.4"].bullets == ("ipconfig", "ping")

    def test_parse_when_domain_has_pipes_then_normalized_label(self):
        objectives = parse_objectives_text(SAMPLE_TEXT)

        assert objectives["1.3"].domain == "1.0 Operating Systems"
        assert objectives["2.4"].domain == "2.0 Security Hardening"

    def test_parse_when_objective_before_domain_then_domain_none(self):
        objectives = parse_objectives_text("3.1\nTitle only")

        assert objectives == {"3.1": ObjectiveMeta("Title only", (), None)}

    def test_parse_when_id_repeats_then_later_block_kept(self, caplog):
        text = "1.0 Domain\n1.1\nFirst\n• a\n1.1\nSecond\n• b"

        objectives = parse_objectives_text(text)

        assert objectives["1.1"].title == "Second"
        assert "appears twice" in caplog.text

    def test_parse_when_empty_block_then_blank_title(self):
        objectives = parse_objectives_text("1.0 Domain\n1.1\n1.2\nSecond")

        assert objectives["1.1"].title == ""
        assert objectives["1.2"].title == "Second"

    def test_parse_when_custom_markers_then_used(self):
        config = ExtractionConfig(bullet_marker="*", sub_bullet_marker="-")

        objectives = parse_objectives_text("2.0 Networking\n2.1\nPorts\n* SSH\n- Telnet", config)

        assert objectives["2.1"].bullets == ("SSH", "Telnet")

    def test_parse_when_no_objectives_then_empty(self):
        assert parse_objectives_text("Nothing to see\n1.0 Domain") == {}


class TestExtractionConfig:

    @pytest.mark.parametrize("kwargs", [
        {"header_ratio": 0.5},
        {"footer_ratio": -0.1},
        {"bullet_marker": ""},
        {"first_page": -1},
    ])
    def test_config_when_invalid_then_raises(self, kwargs):
        with pytest.raises(ValueError):
            ExtractionConfig(**kwargs)


class TestWriteObjectivesJson:

    def test_write_when_objectives_then_loadable_catalog(self, tmp_path):
        path = tmp_path / "out" / "objectives.json"

        write_objectives_json(parse_objectives_text(SAMPLE_TEXT), path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["1.4"] == {
            "domain": "1.0 Operating Systems",
            "title": "Given a scenario, use Windows command-line tools.",
            "bullets": ["ipconfig", "ping"],
        }
        catalog = StaticObjectiveCatalog.from_data({"220-1202": data})
        assert catalog.list_objectives_by_domain("220-1202", "1.0") == ["1.3", "1.4"]


ASCII_CONFIG = ExtractionConfig(bullet_marker="*", sub_bullet_marker="-", header_ratio=0.1)


@pytest.fixture
def objectives_pdf(tmp_path):
    """Two-page PDF with a running header on each page."""
    path = tmp_path / "objectives.pdf"
    doc = fitz.open()
    for body in ("2.0 Networking\n2.1\nCompare ports and protocols.\n* SSH\n* DNS",
                 "2.2\nCompare wireless standards.\n* WPA3"):
        page = doc.new_page()
        page.insert_text((72, 20), "CompTIA A+ 220-1201 Exam Objectives 1.0", fontsize=9)
        page.insert_text((72, 200), body, fontsize=11)
    doc.save(path)
    doc.close()
    return path


class TestPdfExtraction:
    """Tests for the PyMuPDF-backed reader."""

    def test_extract_text_when_header_ratio_then_header_dropped(self, objectives_pdf):
        text = extract_pdf_text(objectives_pdf, ASCII_CONFIG)

        assert "Exam Objectives" not in text
        assert "Compare ports and protocols." in text

    def test_extract_objectives_when_pdf_then_catalog_entries(self, objectives_pdf):
        objectives = extract_objectives_pdf(objectives_pdf, ASCII_CONFIG)

        assert objectives["2.1"] == ObjectiveMeta(
            "Compare ports and protocols.", ("SSH", "DNS"), "2.0 Networking",
        )
        assert objectives["2.2"].domain == "2.0 Networking"
        assert objectives["2.2"].bullets == ("WPA3",)

    def test_extract_when_first_page_set_then_earlier_pages_skipped(self, objectives_pdf):
        config = ExtractionConfig(bullet_marker="*", sub_bullet_marker="-", first_page=1)

        objectives = extract_objectives_pdf(objectives_pdf, config)

        assert list(objectives) == ["2.2"]
        assert objectives["2.2"].domain is None

    def test_extract_when_missing_file_then_raises(self, tmp_path):
        with pytest.raises(ExtractionError, match="not found"):
            extract_pdf_text(tmp_path / "missing.pdf")

    def test_extract_when_not_a_pdf_then_raises(self, tmp_path):
        path = tmp_path / "fake.pdf"
        path.write_bytes(b"this is not a pdf")

        with pytest.raises(ExtractionError, match="Cannot read"):
            extract_pdf_text(path)
