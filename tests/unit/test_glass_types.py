"""Unit tests for GlassTypeService."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from glass_pricing.application.glass_types import CreateGlassTypeCommand, GlassTypeService
from glass_pricing.domain.exceptions import GlassTypeNotFoundError, ValidationError
from glass_pricing.domain.models import GlassType
from glass_pricing.domain.values import Money


@pytest.fixture
def service(mock_uow: AsyncMock) -> GlassTypeService:
    return GlassTypeService(mock_uow)


class TestCreateGlassType:
    """Tests for GlassTypeService.create_glass_type."""

    @pytest.mark.asyncio
    async def test_create_glass_type(self, service: GlassTypeService, mock_uow: AsyncMock) -> None:
        glass_type = await service.create_glass_type(
            CreateGlassTypeCommand(name="Bronze 6mm", thickness=Decimal("6"), price_per_square_meter=Decimal("180"))
        )

        assert glass_type.price_per_square_meter == Money.of("180")
        assert glass_type.active
        mock_uow.glass_types.add.assert_awaited_once_with(glass_type)
        mock_uow.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_zero_price_is_rejected(self, service: GlassTypeService, mock_uow: AsyncMock) -> None:
        with pytest.raises(ValidationError, match="must be positive"):
            await service.create_glass_type(
                CreateGlassTypeCommand(name="Free", thickness=Decimal("6"), price_per_square_meter=Decimal("0"))
            )

        mock_uow.glass_types.add.assert_not_called()
        mock_uow.commit.assert_not_called()


class TestUpdateGlassType:
    """Tests for renaming, repricing and activation."""

    @pytest.mark.asyncio
    async def test_rename(self, service: GlassTypeService, mock_uow: AsyncMock, clear_glass: GlassType) -> None:
        mock_uow.glass_types.get.return_value = clear_glass

        glass_type = await service.rename(clear_glass.id, "  Clear 8mm tempered ")

        assert glass_type.name == "Clear 8mm tempered"
        mock_uow.glass_types.update.assert_awaited_once_with(clear_glass)
        mock_uow.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_blank_name_leaves_glass_unchanged(
        self, service: GlassTypeService, mock_uow: AsyncMock, clear_glass: GlassType
    ) -> None:
        mock_uow.glass_types.get.return_value = clear_glass

        with pytest.raises(ValidationError, match="name is required"):
            await service.rename(clear_glass.id, " ")

        assert clear_glass.name == "Clear 8mm"
        mock_uow.glass_types.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_reprice(self, service: GlassTypeService, mock_uow: AsyncMock, clear_glass: GlassType) -> None:
        mock_uow.glass_types.get.return_value = clear_glass

        glass_type = await service.reprice(clear_glass.id, Decimal("165.50"))

        assert glass_type.price_per_square_meter == Money.of("165.50")
        mock_uow.glass_types.update.assert_awaited_once_with(clear_glass)

    @pytest.mark.asyncio
    async def test_deactivate_then_activate(
        self, service: GlassTypeService, mock_uow: AsyncMock, clear_glass: GlassType
    ) -> None:
        mock_uow.glass_types.get.return_value = clear_glass

        await service.deactivate(clear_glass.id)
        assert not clear_glass.active

        await service.activate(clear_glass.id)
        assert clear_glass.active
        assert mock_uow.glass_types.update.await_count == 2
        assert mock_uow.commit.call_count == 2

    @pytest.mark.asyncio
    async def test_unknown_glass_type(self, service: GlassTypeService, mock_uow: AsyncMock) -> None:
        with pytest.raises(GlassTypeNotFoundError, match="Glass type missing not found"):
            await service.reprice("missing", Decimal("100"))

        mock_uow.glass_types.update.assert_not_called()


class TestQueries:
    """Tests for glass catalog reads."""

    @pytest.mark.asyncio
    async def test_active_glass_types(
        self, service: GlassTypeService, mock_uow: AsyncMock, clear_glass: GlassType
    ) -> None:
        mock_uow.glass_types.get_active.return_value = [clear_glass]

        assert await service.active_glass_types() == [clear_glass]

    @pytest.mark.asyncio
    async def test_get_glass_type(
        self, service: GlassTypeService, mock_uow: AsyncMock, clear_glass: GlassType
    ) -> None:
        mock_uow.glass_types.get.return_value = clear_glass

        assert await service.get_glass_type(clear_glass.id) is clear_glass
