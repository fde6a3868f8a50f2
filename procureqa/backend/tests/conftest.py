"""
Shared fixtures: an in-memory SQLite database per test, a TestClient whose
get_db dependency points at it, and an in-memory .xlsx builder.
"""
import os
import tempfile

# Image/upload dirs are read when app.main is imported (static mount)
_TMP_ROOT = tempfile.mkdtemp(prefix="procureqa-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IMAGES_DIR"] = os.path.join(_TMP_ROOT, "images")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_ROOT, "uploads")

from io import BytesIO  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from openpyxl import Workbook  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Supplier  # noqa: E402

IMPORT_HEADERS = ["Product Name", "Item Code*", "Unit*", "Group", "Brand", "Description"]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage_dirs(tmp_path, monkeypatch):
    images = tmp_path / "images"
    uploads = tmp_path / "uploads"
    monkeypatch.setattr(settings, "IMAGES_DIR", str(images))
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(uploads))
    return {"images": images, "uploads": uploads}


@pytest.fixture
def client(session_factory, storage_dirs):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def supplier(db_session):
    supplier = Supplier(
        first_name="Nadia",
        last_name="Haddad",
        email="sales@gulfbolts.example",
        company_name="Gulf Bolts Trading",
        contact_number="974 55123456",
    )
    db_session.add(supplier)
    db_session.commit()
    db_session.refresh(supplier)
    return supplier


def _build_xlsx(rows, headers=None) -> bytes:
    """Workbook bytes with a header row; rows are dicts keyed by header or lists."""
    headers = headers or IMPORT_HEADERS
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(headers)
    for row in rows:
        values = [row.get(h) for h in headers] if isinstance(row, dict) else list(row)
        sheet.append([None if v == "" else v for v in values])
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_xlsx():
    return _build_xlsx


def product_row(name, item_code, unit="pcs", group="Hardware", brand="Acme", description="d"):
    return {
        "Product Name": name,
        "Item Code*": item_code,
        "Unit*": unit,
        "Group": group,
        "Brand": brand,
        "Description": description,
    }


@pytest.fixture
def row():
    return product_row
