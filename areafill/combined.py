from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from areafill.renderers import (
    RENDERER_KINDS,
    BarChartRenderer,
    DataRenderer,
    LineChartRenderer,
    RenderContext,
    RendererKind,
    ScatterChartRenderer,
    series_kind,
)
from areafill.series import Series


LOGGER = logging.getLogger(__name__)

RendererFactory = Callable[[Sequence[Series]], DataRenderer]

DEFAULT_DRAW_ORDER: tuple[RendererKind, ...] = ("bar", "bubble", "line", "candle", "scatter")


def default_registry() -> dict[RendererKind, RendererFactory]:
    return {
        "bar": BarChartRenderer,
        "line": LineChartRenderer,
        "scatter": ScatterChartRenderer,
    }


def validate_draw_order(order: Iterable[str]) -> tuple[RendererKind, ...]:
    out: list[RendererKind] = []
    for kind in order:
        if kind not in RENDERER_KINDS:
            raise ValueError(f"unknown renderer kind: {kind!r}")
        out.append(kind)  # type: ignore[arg-type]
    return tuple(out)


class CombinedRenderer:
    """Draws several chart kinds into one view.

    Kinds earlier in ``draw_order`` are drawn first and so sit further back.
    A renderer is created for a kind only when there is series data of that
    kind and a factory registered for it.
    """

    def __init__(
        self,
        series: Sequence[Series],
        *,
        draw_order: Sequence[str] = DEFAULT_DRAW_ORDER,
        registry: dict[RendererKind, RendererFactory] | None = None,
    ) -> None:
        self._series = list(series)
        self._registry = default_registry() if registry is None else dict(registry)
        self._draw_order: tuple[RendererKind, ...] = validate_draw_order(draw_order) or DEFAULT_DRAW_ORDER
        self._renderers: list[DataRenderer] = []
        self.create_renderers()

    @property
    def draw_order(self) -> tuple[RendererKind, ...]:
        return self._draw_order

    @draw_order.setter
    def draw_order(self, order: Sequence[str]) -> None:
        validated = validate_draw_order(order)
        if not validated:
            return
        self._draw_order = validated
        self.create_renderers()

    @property
    def sub_renderers(self) -> list[DataRenderer]:
        return list(self._renderers)

    def register(self, kind: RendererKind, factory: RendererFactory) -> None:
        validate_draw_order([kind])
        self._registry[kind] = factory
        self.create_renderers()

    def renderer_for(self, kind: RendererKind) -> DataRenderer | None:
        for renderer in self._renderers:
            if renderer.kind == kind:
                return renderer
        return None

    def create_renderers(self) -> None:
        grouped: dict[RendererKind, list[Series]] = {}
        for spec in self._series:
            grouped.setdefault(series_kind(spec), []).append(spec)
        renderers: list[DataRenderer] = []
        for kind in self._draw_order:
            members = grouped.get(kind)
            factory = self._registry.get(kind)
            if not members or factory is None:
                continue
            renderers.append(factory(members))
        self._renderers = renderers
        LOGGER.debug("combined renderer order: %s", [r.kind for r in renderers])

    def draw_data(self, ctx: RenderContext) -> None:
        for renderer in self._renderers:
            renderer.draw_data(ctx)
