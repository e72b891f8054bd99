import sys
import pathlib

import pytest

# Ensure project root is on sys.path so 'import verbump' works when pytest runs
# from different working directories or when running individual tests.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from samples import CS_SAMPLE, ISL_SAMPLE, RC_SAMPLE, VDPROJ_CAB_SAMPLE, VDPROJ_MSI_SAMPLE
from verbump.logging_utils import reset_suppressed_state


@pytest.fixture(autouse=True)
def _clean_suppression_state():
    reset_suppressed_state()
    yield
    reset_suppressed_state()


@pytest.fixture
def write_sample(tmp_path):
    """Write ``text`` under ``tmp_path`` and return the path."""
    def _write(name, text, encoding='utf-8', bom=b'', newline='\n'):
        path = tmp_path / name
        path.write_bytes(bom + text.replace('\n', newline).encode(encoding))
        return path
    return _write


@pytest.fixture
def cs_file(write_sample):
    return write_sample('AssemblyInfo.cs', CS_SAMPLE)


@pytest.fixture
def rc_file(write_sample):
    return write_sample('app.rc', RC_SAMPLE)


@pytest.fixture
def msi_file(write_sample):
    return write_sample('Setup.vdproj', VDPROJ_MSI_SAMPLE)


@pytest.fixture
def cab_file(write_sample):
    return write_sample('Package.vdproj', VDPROJ_CAB_SAMPLE)


@pytest.fixture
def isl_file(write_sample):
    return write_sample('Setup.isl', ISL_SAMPLE)
