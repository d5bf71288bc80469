# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/slides.py
"""
Slide orchestrator.

``SlideRenderer.render(sources)`` returns one ``Islide`` per source. Nothing
is compiled up front: each slide holds a memoized loader (compile ➜ evaluate,
at most once even with overlapping callers) and a memoized ``css()``.
A failing slide never affects the others; the lazy component substitutes the
error placeholder and logs the slide number.
"""
from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

from slidecraft.compiler.markdown import create_markdown
from slidecraft.compiler.note import render_note
from slidecraft.compiler.pipeline import compile_css, compile_to_runnable_unit
from slidecraft.compiler.transforms import slide_filepath
from slidecraft.config import get_settings
from slidecraft.css.engine import CssEngine, GenerateOutput
from slidecraft.deck import parse_deck
from slidecraft.errors import SlideCompileError
from slidecraft.runtime.components import Component, SlideError, SlideLoading, as_component
from slidecraft.runtime.context import ModuleContext
from slidecraft.runtime.evaluator import evaluate
from slidecraft.runtime.modules import ModuleNamespace
from slidecraft.types import CompileOptions, RendererOptions, SlideInfo, SlideSource, SourceSlideInfo

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[ModuleNamespace]]


# --------------------------------------------------------------------------------------
# Lazy component
# --------------------------------------------------------------------------------------

class LazySlideComponent:
    """
    Framework-facing wrapper around a slide loader.

    ``render()`` waits for the slide; ``stream()`` yields the loading
    placeholder first when loading takes longer than ``delay`` ms, then the
    final markup. A failed load renders the error placeholder.
    """

    def __init__(self,
                 loader: Loader,
                 delay: int = 300,
                 loading: Optional[Component] = None,
                 error: Optional[Component] = None,
                 on_error: Optional[Callable[[BaseException], None]] = None,
                 no: Optional[int] = None):
        self.loader = loader
        self.delay = delay
        self.loading = loading or SlideLoading()
        self.error = error or SlideError()
        self.on_error = on_error
        self.no = no
        self.last_error: Optional[BaseException] = None

    def _report(self, e: BaseException) -> None:
        self.last_error = e
        if self.on_error is not None:
            self.on_error(e)
        elif self.no is not None:
            logger.error("Failed to load slide %d: %s", self.no, e)
        else:
            logger.error("Failed to load slide: %s", e)

    async def resolve(self) -> Component:
        try:
            module = await self.loader()
        except Exception as e:
            self._report(e)
            return self.error
        self.last_error = None
        return module.default

    async def render(self, props: Optional[Mapping[str, Any]] = None) -> str:
        component = await self.resolve()
        if component is self.error:
            return self.error.render({"error": self.last_error, "no": self.no})
        return component.render(dict(props or {}))

    async def stream(self, props: Optional[Mapping[str, Any]] = None) -> AsyncIterator[str]:
        task = asyncio.ensure_future(self.render(props))
        done, _ = await asyncio.wait({task}, timeout=max(self.delay, 0) / 1000)
        if not done:
            yield self.loading.render({"no": self.no})
        yield await task


# --------------------------------------------------------------------------------------
# Slides
# --------------------------------------------------------------------------------------

@dataclass
class Islide:
    no: int
    meta: Dict[str, Any]
    load: Loader
    component: LazySlideComponent
    css: Callable[[], Awaitable[GenerateOutput]]


@dataclass
class _SlideState:
    task: Optional[asyncio.Future] = None
    css: Optional[GenerateOutput] = None


class SlideRenderer:

    def __init__(self, options: Optional[RendererOptions] = None, context: Optional[ModuleContext] = None):
        self.options = options or RendererOptions()
        self._owns_context = context is None
        self.context = (context or ModuleContext()).init()
        self.slides_info: List[SlideInfo] = []
        self.md = create_markdown(self.options.md_options)

        self.slide_loading = as_component(self.options.slide_loading, "slide-loading") \
            if self.options.slide_loading is not None else SlideLoading()
        self.slide_error = as_component(self.options.slide_error, "slide-error") \
            if self.options.slide_error is not None else SlideError()
        delay = self.options.loading_delay_ms
        self.loading_delay_ms = delay if delay is not None else get_settings().LOADING_DELAY_MS

        for name, component in self.options.components.items():
            self.context.register_custom_component(name, component)
        for name, source in self.options.sfc_components.items():
            self.context.register_source_component(name, source, self.options.sfc_options)

        css = self.options.css
        self.css_engine: Optional[CssEngine] = CssEngine(
            custom_config_raw=css.custom_config_raw,
            custom_css_layer_name=css.custom_css_layer_name,
        ) if css.enabled else None

    # ---------------- deck ----------------

    @staticmethod
    def parse(code: str) -> List[SlideSource]:
        return parse_deck(code)

    def get_slides_info(self, sources: Iterable[Union[SlideSource, Mapping[str, Any]]]) -> List[SlideInfo]:
        infos = []
        for i, s in enumerate(sources):
            source = s if isinstance(s, SlideSource) else SlideSource.model_validate(s)
            frontmatter = dict(source.frontmatter)
            infos.append(SlideInfo(
                frontmatter=frontmatter,
                content=source.content,
                note=source.note,
                index=i,
                source=SourceSlideInfo(
                    frontmatter=frontmatter,
                    content=source.content,
                    filepath=slide_filepath(i),
                    index=i,
                ),
            ))
        return infos

    # ---------------- per slide ----------------

    def _compile_options(self, info: SlideInfo) -> CompileOptions:
        return CompileOptions(
            slides_info=self.slides_info,
            filename=info.source.filepath,
            code=info.source.content,
            frontmatter=info.frontmatter,
            md_options=self.options.md_options,
            sfc_options=self.options.sfc_options,
            components=self.options.components,
            sfc_components=self.options.sfc_components,
            layouts=self.context.layouts,
        )

    async def _compile_and_evaluate(self, info: SlideInfo, no: int) -> ModuleNamespace:
        result = compile_to_runnable_unit(self._compile_options(info), md=self.md)
        if not result.ok:
            logger.error("Failed to compile slide %d: %s", no, result.errors)
            raise SlideCompileError(f"Failed to compile slide {no}", result.errors)
        component = await evaluate(result.component_code, info.source.filepath, self.context)()
        return ModuleNamespace(default=component)

    def _make_loader(self, info: SlideInfo, no: int, state: _SlideState) -> Loader:
        async def load() -> ModuleNamespace:
            if state.task is None:
                state.task = asyncio.ensure_future(self._compile_and_evaluate(info, no))
            task = state.task
            try:
                return await asyncio.shield(task)
            except Exception:
                # failed attempts are not memoized; the next load() compiles again
                if state.task is task:
                    state.task = None
                raise

        return load

    def _make_css(self, info: SlideInfo, state: _SlideState) -> Callable[[], Awaitable[GenerateOutput]]:
        async def css() -> GenerateOutput:
            if state.css is not None:
                return state.css
            output = await compile_css(
                self._compile_options(info),
                engine=self.css_engine,
                custom_css=self.options.css.custom_css,
                md=self.md,
            )
            if output.custom_config_error is None:
                state.css = output
            return output

        return css

    def _meta(self, info: SlideInfo, no: int) -> Dict[str, Any]:
        note = render_note(info.note)
        return {
            "slide": {
                "frontmatter": info.frontmatter,
                "content": info.content,
                "note": info.note,
                "note_html": note.html,
                "clicks": note.clicks,
                "index": info.index,
                "filepath": info.source.filepath,
                "start": math.nan,
                "id": info.index,
                "no": no,
            },
            "clicks_context": None,
        }

    async def render(self, sources: Iterable[Union[SlideSource, Mapping[str, Any]]]) -> List[Islide]:
        if self.css_engine is not None:
            try:
                await self.css_engine.init()
            except Exception:
                logger.exception("CSS engine initialization failed")
        self.slides_info = self.get_slides_info(sources)

        slides: List[Islide] = []
        for info in self.slides_info:
            no = info.index + 1
            state = _SlideState()
            load = self._make_loader(info, no, state)
            slides.append(Islide(
                no=no,
                meta=self._meta(info, no),
                load=load,
                component=LazySlideComponent(
                    load,
                    delay=self.loading_delay_ms,
                    loading=self.slide_loading,
                    error=self.slide_error,
                    no=no,
                ),
                css=self._make_css(info, state),
            ))
        return slides

    def dispose(self) -> None:
        self.slides_info = []
        if self._owns_context:
            self.context.dispose()


async def render_slides(sources: Iterable[Union[SlideSource, Mapping[str, Any]]],
                        options: Optional[RendererOptions] = None) -> List[Islide]:
    renderer = SlideRenderer(options)
    return await renderer.render(sources)
