"""Shared fixtures for presenter tests."""

from pathlib import Path

import pytest

from sow_presenter.bible.loader import BibleLoader
from sow_presenter.config import PresenterConfig
from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.db.schedule_client import ScheduleClient
from sow_presenter.presenter.broadcast import InMemoryBroadcastChannel
from sow_presenter.presenter.editor import ScheduleEditor
from sow_presenter.presenter.state import PresentationStateStore

AMAZING_GRACE = "Amazing grace\nhow sweet\n\nthe sound"

SAMPLE_BIBLE_XML = """<?xml version="1.0" encoding="utf-8"?>
<XMLBIBLE biblename="Nueva Version Internacional">
  <BIBLEBOOK bnumber="43" bname="Juan">
    <CHAPTER cnumber="3">
      <VERS vnumber="16">Porque tanto amó Dios al mundo que dio a su Hijo unigénito.</VERS>
      <VERS vnumber="17">Dios no envió a su Hijo para condenar al mundo.</VERS>
      <VERS vnumber="18">El que cree en él no es condenado.</VERS>
    </CHAPTER>
    <CHAPTER cnumber="4">
      <VERS vnumber="1">Jesús se enteró de que los fariseos sabían esto.</VERS>
    </CHAPTER>
  </BIBLEBOOK>
  <BIBLEBOOK bnumber="19" bname="Salmos">
    <CHAPTER cnumber="23">
      <VERS vnumber="1">El Señor es mi pastor, nada me falta.</VERS>
    </CHAPTER>
  </BIBLEBOOK>
</XMLBIBLE>
"""


@pytest.fixture
def tmp_db_path(tmp_path):
    """Temporary SQLite database path."""
    return tmp_path / "test.db"


@pytest.fixture
def schedule_client(tmp_db_path):
    """ScheduleClient with an initialized schema."""
    client = ScheduleClient(tmp_db_path)
    client.initialize_schema()
    yield client
    client.close()


@pytest.fixture
def catalog_client(tmp_db_path, schedule_client):
    """CatalogClient on the same database as schedule_client."""
    client = CatalogClient(tmp_db_path)
    yield client
    client.close()


@pytest.fixture
def channel():
    """In-memory broadcast channel with small queues."""
    return InMemoryBroadcastChannel(max_queue_size=8)


@pytest.fixture
def store(channel):
    """Presentation state store publishing on the test channel."""
    return PresentationStateStore(channel, max_lines_per_slide=4)


@pytest.fixture
def bible_xml():
    """Zefania XML with two books."""
    return SAMPLE_BIBLE_XML


@pytest.fixture
def bible_dir(tmp_path, bible_xml):
    """Directory holding a small NVI bible file."""
    directory = tmp_path / "bibles"
    directory.mkdir()
    (directory / "spa-NVI.xmm.xml").write_text(bible_xml, encoding="utf-8")
    return directory


@pytest.fixture
def bible(bible_dir):
    """BibleLoader over the sample bible."""
    return BibleLoader(bible_dir, default_version="NVI")


@pytest.fixture
def editor(schedule_client, catalog_client, store, bible):
    """ScheduleEditor wired to the test database, channel and bible."""
    return ScheduleEditor(schedule_client, catalog_client, store, bible=bible)


@pytest.fixture
def schedule(schedule_client):
    """An empty schedule."""
    return schedule_client.create_schedule("Sunday Service")


@pytest.fixture
def amazing_grace(catalog_client):
    """The Amazing Grace song (two slides at four lines per slide)."""
    return catalog_client.create_song("Amazing Grace", AMAZING_GRACE)


@pytest.fixture
def presenter_config(tmp_path, bible_dir) -> PresenterConfig:
    """Config pointing every path into tmp_path."""
    return PresenterConfig(
        db_path=tmp_path / "db" / "presenter.db",
        bible_dir=bible_dir,
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def config_file(tmp_path, presenter_config) -> Path:
    """presenter_config saved as TOML."""
    path = tmp_path / "config.toml"
    presenter_config.save(path)
    return path
