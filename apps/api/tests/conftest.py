"""Pytest configuration and fixtures for the FreightDesk API test suite.

Provides:
- Per-test in-memory SQLite database (aiosqlite) with tables created fresh
- Disabled rate limiting
- Scripted planners standing in for the chat model
- A mocked extraction model
- Shipment factory fixtures and the demo data set
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

import itertools  # noqa: E402
from collections.abc import AsyncGenerator, Callable, Generator, Sequence  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from langchain_core.messages import AIMessage, BaseMessage  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from freightdesk.core.database import get_async_session  # noqa: E402
from freightdesk.core.deps import get_db, get_extraction_service  # noqa: E402
from freightdesk.core.rate_limit import limiter  # noqa: E402
from freightdesk.main import app  # noqa: E402
from freightdesk.models.base import Base  # noqa: E402
from freightdesk.models.shipment import Shipment, ShipmentStatus  # noqa: E402
from freightdesk.services.extraction_service import ExtractionService  # noqa: E402
from freightdesk.services.graph.planner import get_planner  # noqa: E402

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_USER_ID = "user-a"
OTHER_USER_ID = "user-b"
BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database per test.

    StaticPool keeps a single connection so the test's session and the
    app's sessions see the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for test setup (factory fixtures) and direct service tests."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Planner doubles
# ---------------------------------------------------------------------------


class ScriptedPlanner:
    """Planner that replays prepared replies and records what it was sent."""

    def __init__(self, replies: Sequence[AIMessage] = ()) -> None:
        self.replies = list(replies)
        self.calls: list[list[BaseMessage]] = []
        self.tools_seen: list[list[dict[str, Any]]] = []
        self.systems: list[str] = []

    async def plan(
        self,
        system: str,
        messages: Sequence[BaseMessage],
        tools: Sequence[dict[str, Any]],
    ) -> AIMessage:
        self.systems.append(system)
        self.calls.append(list(messages))
        self.tools_seen.append(list(tools))
        if not self.replies:
            raise RuntimeError("planner called more times than scripted")
        return self.replies.pop(0)


class FailingPlanner:
    """Planner whose every call fails, like an unreachable model."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or ConnectionError("model unavailable")

    async def plan(self, *_args: Any, **_kwargs: Any) -> AIMessage:
        raise self.error


_call_ids = itertools.count(1)


def tool_calls(*calls: tuple[str, dict[str, Any]]) -> AIMessage:
    """An assistant reply requesting the given (name, args) tool calls."""
    return AIMessage(
        content="",
        tool_calls=[
            {"name": name, "args": args, "id": f"call_{next(_call_ids)}"} for name, args in calls
        ],
    )


def answer(text: str) -> AIMessage:
    """A plain-text assistant reply."""
    return AIMessage(content=text)


@pytest.fixture
def make_planner() -> Callable[..., ScriptedPlanner]:
    """Build a ScriptedPlanner from replies.

    Usage:
        planner = make_planner(
            tool_calls(("list_shipments", {"status": "pending"})),
            answer("You have 2 pending shipments."),
        )
    """

    def _make(*replies: AIMessage) -> ScriptedPlanner:
        return ScriptedPlanner(replies)

    return _make


@pytest.fixture
def planner() -> ScriptedPlanner:
    """Planner used by the ``client`` fixture; tests append replies to it."""
    return ScriptedPlanner()


# ---------------------------------------------------------------------------
# Extraction model mock
# ---------------------------------------------------------------------------


@pytest.fixture
def extraction_llm() -> MagicMock:
    """Chat model double for ExtractionService.

    Set ``extraction_llm.ainvoke.return_value = AIMessage(content=...)`` in a
    test to control what the model "returns".
    """
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(return_value=AIMessage(content="{}"))
    return mock_llm


@pytest.fixture
def mock_openai_chat() -> Generator[MagicMock, None, None]:
    """Patch ChatOpenAI where ExtractionService builds its default model."""
    with patch("freightdesk.services.extraction_service.ChatOpenAI") as mock_class:
        mock_llm = MagicMock()
        mock_class.return_value = mock_llm
        mock_llm.ainvoke = AsyncMock(return_value=AIMessage(content="{}"))
        yield mock_class


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    planner: ScriptedPlanner,
    extraction_llm: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with DB, planner and extraction model overridden."""

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_async_session] = _override_session
    app.dependency_overrides[get_db] = _override_session
    app.dependency_overrides[get_planner] = lambda: planner
    app.dependency_overrides[get_extraction_service] = lambda: ExtractionService(
        llm=extraction_llm
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Model Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def shipment_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Shipment rows.

    Each call without an explicit ``created_at`` is one hour older than the
    previous one, so creation order is the reverse of newest-first order.
    """
    counter = itertools.count()

    async def _create(
        *,
        user_id: str = TEST_USER_ID,
        origin_city: str = "Chicago",
        origin_state: str = "IL",
        destination_city: str = "Detroit",
        destination_state: str = "MI",
        shipper_name: str = "Windy City Exports",
        consignee_name: str = "Motor City Imports",
        weight: float | None = 22000,
        status: ShipmentStatus = ShipmentStatus.IN_TRANSIT,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> Shipment:
        created = created_at or BASE_TIME - timedelta(hours=next(counter))
        shipment = Shipment(
            user_id=user_id,
            origin_city=origin_city,
            origin_state=origin_state,
            destination_city=destination_city,
            destination_state=destination_state,
            shipper_name=shipper_name,
            consignee_name=consignee_name,
            weight=weight,
            status=status,
            created_at=created,
            updated_at=updated_at or created,
        )
        db_session.add(shipment)
        await db_session.commit()
        return shipment

    return _create


@pytest_asyncio.fixture
async def demo_shipments(db_session: AsyncSession) -> list[Shipment]:
    """The 20-shipment demo set for TEST_USER_ID, newest first."""
    from scripts.seed_demo import build_demo_shipments

    rows = build_demo_shipments(TEST_USER_ID, now=BASE_TIME)
    shipments = [Shipment(**row) for row in rows]
    db_session.add_all(shipments)
    await db_session.commit()
    return shipments


# ---------------------------------------------------------------------------
# PDF Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Generate a two-page bill of lading PDF with known text."""
    import io

    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)

    # Page 1
    c.drawString(100, 750, "Page 1: BILL OF LADING")
    c.drawString(100, 730, "Ship From: Windy City Exports, Chicago, IL")
    c.drawString(100, 710, "Ship To: Motor City Imports, Detroit, MI")
    c.showPage()

    # Page 2
    c.drawString(100, 750, "Page 2: Total weight 22,000 lbs")
    c.drawString(100, 730, "Pickup date: 2026-03-07")
    c.showPage()

    c.save()
    return buffer.getvalue()


@pytest.fixture
def empty_pdf_bytes() -> bytes:
    """Generate a PDF with no extractable text (a blank page, like a scan)."""
    import io

    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    c.showPage()
    c.save()
    return buffer.getvalue()


@pytest.fixture
def corrupted_pdf_bytes() -> bytes:
    """Return truncated/corrupted PDF bytes for error handling tests."""
    return b"%PDF-1.4\n1 0 obj\n<<\n/Type /Catalog\n"
