import sys
from pathlib import Path

import pytest

# Ensure the package is importable when running pytest from the repository root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def build_place(
    *,
    input_id="",
    link="",
    title="",
    emails=None,
    website=None,
    full_address=None,
    phone=None,
    city=None,
):
    """Place array with values at the positions Maps uses."""
    place = [None] * 184
    place[0] = input_id
    place[1] = link
    place[5] = emails
    place[7] = [website, website and website.split("//")[-1]] if website is not None else None
    place[11] = title
    place[18] = full_address
    place[178] = [[phone, 1]] if phone is not None else None
    place[183] = [None, [None, None, None, city]] if city is not None else None
    return place


def build_payload(place):
    return [None, None, None, None, None, None, place]


@pytest.fixture
def place_factory():
    return build_place


@pytest.fixture
def payload_factory():
    return lambda **kwargs: build_payload(build_place(**kwargs))
