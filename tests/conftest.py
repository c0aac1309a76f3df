import json
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import exam_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from exam_toolkit.builder.controller import ExamResources
from exam_toolkit.builder.pbq import PbqLibrary
from exam_toolkit.common.objectives import StaticObjectiveCatalog
from exam_toolkit.core.models import DomainBlueprint, ObjectiveMeta
from exam_toolkit.plugins import reload_plugins


TEST_EXAM = "220-1201"


# Common test fixtures
@pytest.fixture
def blueprint():
    """Core 1 blueprint weights."""
    return (
        DomainBlueprint("1.0", "Mobile Devices", 13),
        DomainBlueprint("2.0", "Networking", 23),
        DomainBlueprint("3.0", "Hardware", 25),
        DomainBlueprint("4.0", "Virtualization and Cloud Computing", 11),
        DomainBlueprint("5.0", "Hardware and Network Troubleshooting", 28),
    )


@pytest.fixture
def catalog():
    """Small catalog with a curated objective (2.1) and generic ones."""
    return StaticObjectiveCatalog({
        TEST_EXAM: {
            "1.1": ObjectiveMeta(
                title="Install mobile device hardware.",
                bullets=("Battery", "Keyboard/keys", "RAM", "HDD/SSD", "Camera/webcam"),
                domain="1.0 Mobile Devices",
            ),
            "2.1": ObjectiveMeta(
                title="Compare TCP and UDP ports.",
                bullets=("22 – SSH", "53 – DNS", "80 – HTTP", "443 – HTTPS", "3389 – RDP"),
                domain="2.0 Networking",
            ),
            "2.2": ObjectiveMeta(
                title="Compare Wi-Fi standards.",
                bullets=("802.11ac", "WPA3"),
                domain="2.0 Networking",
            ),
            "3.2": ObjectiveMeta(
                title="Summarize cable types.",
                bullets=("RJ-45", "RJ-11", "LC/SC/ST", "USB-C"),
                domain="3.0 Hardware",
            ),
            "5.5": ObjectiveMeta(
                title="Apply the troubleshooting methodology.",
                bullets=("Identify the problem", "Establish a theory", "Test the theory"),
                domain="5.0 Hardware and Network Troubleshooting",
            ),
        }
    })


@pytest.fixture
def order_template_data():
    return {
        "id": "troubleshooting-steps",
        "kind": "order",
        "objective": "5.5",
        "prompt": "PBQ: Put the troubleshooting steps in the BEST order.",
        "steps": ["Identify", "Theorize", "Test", "Plan", "Verify", "Document"],
        "explanation": "Standard troubleshooting workflow.",
    }


@pytest.fixture
def match_template_data():
    return {
        "id": "connector-usage",
        "kind": "match",
        "objective": "3.2",
        "prompt": "PBQ: Match each connector to its usage.",
        "left_label": "Connector",
        "right_label": "Usage",
        "pairs": [
            {"left": "RJ-45", "right": "Ethernet"},
            {"left": "RJ-11", "right": "Telephone"},
            {"left": "LC", "right": "Fiber"},
        ],
        "distractors": ["Coaxial TV", "USB peripheral", "Analog video"],
    }


@pytest.fixture
def pbq_library(order_template_data, match_template_data):
    return PbqLibrary.from_data(TEST_EXAM, [order_template_data, match_template_data])


@pytest.fixture
def resources(blueprint, catalog, pbq_library):
    return ExamResources(
        exam=TEST_EXAM,
        blueprint=blueprint,
        catalog=catalog,
        pbq_library=pbq_library,
    )


@pytest.fixture
def plugin_root(tmp_path: Path, monkeypatch):
    """
    Empty plugins directory installed via EXAM_TOOLKIT_PLUGINS_DIR.

    The registry is reset before and after the test.
    """
    root = tmp_path / "plugins"
    root.mkdir()
    monkeypatch.setenv("EXAM_TOOLKIT_PLUGINS_DIR", str(root))
    reload_plugins()
    yield root
    monkeypatch.delenv("EXAM_TOOLKIT_PLUGINS_DIR", raising=False)
    reload_plugins()


def write_plugin(root: Path, dirname: str, manifest: dict, objectives=None, templates=None) -> Path:
    """Create a plugin directory under root."""
    plugin_dir = root / dirname
    plugin_dir.mkdir()
    (plugin_dir / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    if objectives is not None:
        (plugin_dir / "objectives.json").write_text(json.dumps(objectives), encoding="utf-8")
    if templates is not None:
        (plugin_dir / "pbq_templates.json").write_text(json.dumps({"templates": templates}), encoding="utf-8")
    return plugin_dir


@pytest.fixture
def make_plugin(plugin_root):
    """Factory writing plugin directories into the isolated plugins root."""
    def _make(dirname: str, manifest: dict, objectives=None, templates=None) -> Path:
        plugin_dir = write_plugin(plugin_root, dirname, manifest, objectives, templates)
        reload_plugins()
        return plugin_dir
    return _make


@pytest.fixture
def core1_manifest():
    return {
        "code": TEST_EXAM,
        "name": "CompTIA A+ Core 1",
        "board": "CompTIA",
        "default": True,
        "blueprint": [
            {"domain": "1.0", "label": "Mobile Devices", "weight": 13},
            {"domain": "2.0", "label": "Networking", "weight": 23},
            {"domain": "3.0", "label": "Hardware", "weight": 25},
            {"domain": "4.0", "label": "Virtualization and Cloud Computing", "weight": 11},
            {"domain": "5.0", "label": "Hardware and Network Troubleshooting", "weight": 28},
        ],
    }
