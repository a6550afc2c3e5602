"""
Integration tests for the full ChannelKit export pipeline.

Tests end-to-end flow with REAL repositories over an in-memory SQLite
listing store, REAL exporters, validator and package builder, and MOCKED
external I/O (image downloads via httpx.MockTransport).

Key differences from unit tests:
    - Listings, channels and overrides are real rows read through the repositories
    - Export logs and exported_at are verified in the database afterwards
    - Packages are opened and inspected (zip entries, docx placeholders)
    - The HTTP layer is exercised through an ASGI client with the real deps wiring
"""

import base64
import io
import uuid
import zipfile

import docx
import httpx
import pytest
from sqlalchemy import event, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from channelkit.api.deps import get_package_builder
from channelkit.core.exceptions import ExportNotImplementedError, ExportValidationError
from channelkit.db.database import get_db
from channelkit.db.models import (
    Base,
    Channel,
    ExportLog,
    Listing,
    ListingChannel,
    ListingImage,
)
from channelkit.db.repositories import (
    ChannelRepository,
    ExportLogRepository,
    ListingChannelRepository,
    ListingRepository,
)
from channelkit.main import create_app
from channelkit.packaging.image_fetcher import ImageFetcher
from channelkit.packaging.package_builder import PackageBuilder
from channelkit.services.export_service import ExportService
from channelkit.services.preflight_service import PreflightService

PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

AMAZON_BULLETS = [
    "Hand-thrown stoneware body",
    "Speckled oatmeal glaze",
    "Holds 12 ounces of coffee",
    "Dishwasher and microwave safe",
    "Comfortable wide handle",
]


# ─── Fixtures ──────────────────────────────────────────────


@pytest.fixture
async def session_factory():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    @event.listens_for(eng.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=eng, class_=AsyncSession, expire_on_commit=False)

    await eng.dispose()


@pytest.fixture
async def seeded(session_factory):
    """An Etsy-ready listing linked to Etsy and Amazon."""
    async with session_factory() as session:
        etsy = Channel(slug="etsy", name="Etsy", export_format="flat_text")
        amazon = Channel(slug="amazon", name="Amazon", export_format="document")
        listing = Listing(
            title="Hand-Thrown Ceramic Coffee Mug",
            description="A sturdy stoneware mug glazed in speckled oatmeal.\nHolds 12 oz.",
            price=34.0,
            quantity=12,
            sku="MUG-OAT-12",
            materials=["stoneware", "glaze"],
        )
        listing.images = [
            ListingImage(url="https://cdn.example.com/mug/front.jpg", position=0),
            ListingImage(url="https://cdn.example.com/mug/broken.png", position=1),
            ListingImage(url="https://cdn.example.com/mug/handle.webp", position=2),
        ]
        session.add_all([etsy, amazon, listing])
        await session.flush()

        session.add_all([
            ListingChannel(
                listing_id=listing.id,
                channel_id=etsy.id,
                override_tags=["ceramic mug", "handmade", "stoneware"],
            ),
            ListingChannel(listing_id=listing.id, channel_id=amazon.id),
        ])
        await session.commit()
        return {"listing_id": listing.id, "etsy_id": etsy.id, "amazon_id": amazon.id}


def _image_handler(request: httpx.Request) -> httpx.Response:
    if "broken" in request.url.path:
        return httpx.Response(404)
    return httpx.Response(200, content=PNG_1X1)


def _package_builder() -> PackageBuilder:
    client = httpx.AsyncClient(transport=httpx.MockTransport(_image_handler))
    return PackageBuilder(fetcher=ImageFetcher(client=client))


def _export_service(session: AsyncSession) -> ExportService:
    return ExportService(
        listing_repo=ListingRepository(session),
        channel_repo=ChannelRepository(session),
        listing_channel_repo=ListingChannelRepository(session),
        export_log_repo=ExportLogRepository(session),
        package_builder=_package_builder(),
    )


# ─── Service-level Pipeline ────────────────────────────────


class TestServicePipeline:
    @pytest.mark.asyncio
    async def test_csv_export_records_log_and_marks_exported(self, session_factory, seeded):
        async with session_factory() as session:
            response = await _export_service(session).generate_export(
                str(seeded["listing_id"]), str(seeded["etsy_id"])
            )
            await session.commit()

        assert response.validation.is_ready
        assert response.artifact.content.startswith(b"\xef\xbb\xbf")

        async with session_factory() as session:
            logs = (await session.execute(select(ExportLog))).scalars().all()
            link = (
                await session.execute(
                    select(ListingChannel).where(
                        ListingChannel.listing_id == seeded["listing_id"],
                        ListingChannel.channel_id == seeded["etsy_id"],
                    )
                )
            ).scalar_one()

        assert len(logs) == 1
        assert logs[0].format == "csv"
        assert logs[0].file_size == response.artifact.size
        assert logs[0].score == response.validation.score
        assert link.exported_at is not None

    @pytest.mark.asyncio
    async def test_package_with_one_failed_image(self, session_factory, seeded):
        async with session_factory() as session:
            response = await _export_service(session).generate_export(
                str(seeded["listing_id"]), str(seeded["etsy_id"]), "package"
            )
            await session.commit()

        artifact = response.artifact
        assert artifact.file_name == "hand_thrown_ceramic_coffee_mug_etsy_package.zip"

        with zipfile.ZipFile(io.BytesIO(artifact.content)) as archive:
            names = archive.namelist()
            document = docx.Document(
                io.BytesIO(archive.read("hand_thrown_ceramic_coffee_mug_etsy.docx"))
            )

        assert sorted(n for n in names if n.startswith("images/")) == [
            "images/image_1.jpg",
            "images/image_3.webp",
        ]
        assert "etsy_bulk_upload.csv" in names
        assert "README.txt" in names
        assert "content_copy_paste.txt" in names
        assert sum(1 for n in names if n.endswith(".docx")) == 1

        placeholders = [p.text for p in document.paragraphs if p.text.startswith("[Image ")]
        assert placeholders == ["[Image 2: https://cdn.example.com/mug/broken.png]"]

    @pytest.mark.asyncio
    async def test_validation_failure_writes_nothing(self, session_factory, seeded):
        async with session_factory() as session:
            await session.execute(
                update(ListingChannel)
                .where(ListingChannel.channel_id == seeded["etsy_id"])
                .values(override_title="x" * 150)
            )
            await session.commit()

        async with session_factory() as session:
            with pytest.raises(ExportValidationError) as exc_info:
                await _export_service(session).generate_export(
                    str(seeded["listing_id"]), str(seeded["etsy_id"]), "csv"
                )
            logs = (await session.execute(select(ExportLog))).scalars().all()

        assert any("current: 150" in e for e in exc_info.value.validation.errors)
        assert logs == []

    @pytest.mark.asyncio
    async def test_readiness_across_channels(self, session_factory, seeded):
        async with session_factory() as session:
            service = PreflightService(
                ListingRepository(session),
                ChannelRepository(session),
            )
            readiness = await service.get_listing_readiness(str(seeded["listing_id"]))

        channels = readiness["channels"]
        assert channels[str(seeded["etsy_id"])]["is_ready"] is True
        # Amazon requires five bullet points and the listing has none
        assert channels[str(seeded["amazon_id"])]["is_ready"] is False
        assert readiness["overall"]["ready_count"] == 1
        assert readiness["overall"]["critical_errors"][0].startswith("Amazon: ")

    @pytest.mark.asyncio
    async def test_amazon_csv_not_implemented_after_validation(self, session_factory, seeded):
        async with session_factory() as session:
            await session.execute(
                update(ListingChannel)
                .where(ListingChannel.channel_id == seeded["amazon_id"])
                .values(override_bullets=AMAZON_BULLETS)
            )
            await session.commit()

        async with session_factory() as session:
            with pytest.raises(ExportNotImplementedError):
                await _export_service(session).generate_export(
                    str(seeded["listing_id"]), str(seeded["amazon_id"]), "csv"
                )
            logs = (await session.execute(select(ExportLog))).scalars().all()

        assert logs == []


# ─── HTTP Pipeline ─────────────────────────────────────────


@pytest.fixture
async def api_client(session_factory):
    app = create_app()

    async def sqlite_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = sqlite_db
    app.dependency_overrides[get_package_builder] = _package_builder

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHttpPipeline:
    @pytest.mark.asyncio
    async def test_docx_export_over_http(self, api_client, session_factory, seeded):
        resp = await api_client.post(
            "/api/v1/exports",
            json={
                "listing_id": str(seeded["listing_id"]),
                "channel_id": str(seeded["etsy_id"]),
                "format": "docx",
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["format"] == "docx"
        assert body["file"]["name"] == "hand_thrown_ceramic_coffee_mug_etsy.docx"

        document = docx.Document(io.BytesIO(base64.b64decode(body["file"]["content"])))
        assert document.paragraphs[0].text == "Hand-Thrown Ceramic Coffee Mug"
        assert len(document.inline_shapes) == 2

        async with session_factory() as session:
            logs = (await session.execute(select(ExportLog))).scalars().all()
        assert [log.format for log in logs] == ["docx"]

    @pytest.mark.asyncio
    async def test_amazon_without_bullets_is_400(self, api_client, seeded):
        resp = await api_client.post(
            "/api/v1/exports",
            json={"listing_id": str(seeded["listing_id"]), "channel_id": str(seeded["amazon_id"])},
        )
        # Blocking validation runs before generation
        assert resp.status_code == 400
        assert resp.json()["error_type"] == "ExportValidationError"

    @pytest.mark.asyncio
    async def test_amazon_csv_is_501(self, api_client, session_factory, seeded):
        async with session_factory() as session:
            await session.execute(
                update(ListingChannel)
                .where(ListingChannel.channel_id == seeded["amazon_id"])
                .values(override_bullets=AMAZON_BULLETS)
            )
            await session.commit()

        resp = await api_client.post(
            "/api/v1/exports",
            json={"listing_id": str(seeded["listing_id"]), "channel_id": str(seeded["amazon_id"])},
        )
        assert resp.status_code == 501
        assert resp.json()["error_type"] == "ExportNotImplementedError"
        assert resp.json()["channel_slug"] == "amazon"

    @pytest.mark.asyncio
    async def test_preflight_over_http(self, api_client, seeded):
        resp = await api_client.get(
            "/api/v1/exports/preflight",
            params={"listing_id": str(seeded["listing_id"]), "channel_id": str(seeded["amazon_id"])},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["supports_generation"] is False
        assert body["validation"]["is_ready"] is False
        assert len(body["preflight_checks"]) == 6

    @pytest.mark.asyncio
    async def test_unknown_listing_is_404(self, api_client, seeded):
        resp = await api_client.get(f"/api/v1/listings/{uuid.uuid4()}/readiness")
        assert resp.status_code == 404
        assert resp.json()["error_type"] == "ListingNotFoundError"
