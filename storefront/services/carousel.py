"""
Контроллер баннерной карусели.

Хранит индекс текущего слайда для неизменного упорядоченного набора
слайдов и меняет его по таймеру автопрокрутки и по действиям
пользователя. Индекс зацикливается в обе стороны.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from storefront.core.config import settings

logger = logging.getLogger(__name__)

S = TypeVar("S")


class RepeatingTimer:
    """
    Повторяющаяся задача asyncio с возможностью отмены.

    Callback получает сам таймер, чтобы владелец мог убедиться,
    что срабатывание относится к его текущему таймеру.
    """

    def __init__(self, interval: float, callback: Callable[["RepeatingTimer"], Any]):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    def start(self) -> "RepeatingTimer":
        """
        Запустить таймер в текущем event loop.

        Вызывается только из корутины (нужен запущенный loop).

        Raises:
            RuntimeError: Таймер уже запущен или нет запущенного event loop
        """
        if self._task is not None:
            raise RuntimeError("Timer already started")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise RuntimeError("RepeatingTimer.start() requires a running event loop") from e
        self._task = loop.create_task(self._run())
        return self

    async def _run(self):
        while not self._cancelled:
            await asyncio.sleep(self.interval)
            if self._cancelled:
                return
            try:
                self.callback(self)
            except Exception:
                # Ошибка одного срабатывания не останавливает таймер
                logger.exception("Carousel timer callback failed")

    def cancel(self):
        """Остановить таймер. После отмены callback больше не вызывается."""
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def active(self) -> bool:
        return self._task is not None and not self._cancelled and not self._task.done()


@dataclass
class CarouselState:
    """Снимок состояния карусели для слоя представления."""

    index: int
    count: int
    current: Any
    controls_enabled: bool
    auto_advance: bool
    interval_seconds: float

    @property
    def is_empty(self) -> bool:
        return self.count == 0


class CarouselController(Generic[S]):
    """
    Конечный автомат карусели.

    Состояние: индекс в диапазоне [0, N). При N == 0 карусель пуста и
    показывается заглушка. Автопрокрутка работает только при N > 1 и
    только пока контроллер смонтирован; одновременно существует не
    больше одного таймера.

    Пример:
        async with CarouselController(slides) as carousel:
            carousel.next()
            carousel.current
    """

    def __init__(self, slides: Sequence[S] = (), interval: Optional[float] = None):
        self._slides: List[S] = list(slides)
        self._index = 0
        self.interval = interval if interval is not None else settings.CAROUSEL_INTERVAL_SECONDS
        self._timer: Optional[RepeatingTimer] = None
        self._mounted = False

    # ==================== СОСТОЯНИЕ ====================

    @property
    def slides(self) -> List[S]:
        return list(self._slides)

    @property
    def index(self) -> int:
        return self._index

    @property
    def count(self) -> int:
        return len(self._slides)

    @property
    def current(self) -> Optional[S]:
        """Текущий слайд или None для пустой карусели."""
        if not self._slides:
            return None
        return self._slides[self._index]

    @property
    def controls_enabled(self) -> bool:
        """Кнопки "назад"/"вперед" имеют смысл только при нескольких слайдах."""
        return self.count > 1

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.active

    def snapshot(self) -> CarouselState:
        return CarouselState(
            index=self._index,
            count=self.count,
            current=self.current,
            controls_enabled=self.controls_enabled,
            auto_advance=self.count > 1,
            interval_seconds=self.interval,
        )

    # ==================== ПЕРЕХОДЫ ====================

    def next(self) -> int:
        """Следующий слайд (с последнего - на первый)."""
        if self.controls_enabled:
            self._index = (self._index + 1) % self.count
        return self._index

    def previous(self) -> int:
        """Предыдущий слайд (с первого - на последний)."""
        if self.controls_enabled:
            self._index = (self._index - 1 + self.count) % self.count
        return self._index

    def go_to(self, index: int) -> int:
        """
        Перейти к слайду по индексу.

        Индекс вне [0, N) молча игнорируется, состояние не меняется.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            logger.debug(f"Ignoring carousel jump to non-integer index {index!r}")
            return self._index
        if 0 <= index < self.count:
            self._index = index
        else:
            logger.debug(f"Ignoring carousel jump to {index}, slide count is {self.count}")
        return self._index

    def tick(self) -> int:
        """Шаг автопрокрутки."""
        return self.next()

    # ==================== ЖИЗНЕННЫЙ ЦИКЛ ====================

    def mount(self) -> "CarouselController[S]":
        """
        Смонтировать карусель: индекс сбрасывается на 0,
        при N > 1 запускается таймер автопрокрутки.

        При N > 1 вызывается из запущенного event loop (например, через
        `async with`), иначе RuntimeError. Для N <= 1 таймер не нужен,
        и монтировать можно из синхронного кода.
        """
        self._mounted = True
        self._index = 0
        try:
            self._sync_timer()
        except RuntimeError:
            self._mounted = False
            raise
        return self

    def unmount(self):
        """Размонтировать карусель и гарантированно остановить таймер."""
        self._mounted = False
        self._cancel_timer()

    def set_slides(self, slides: Sequence[S]):
        """Заменить набор слайдов; индекс сбрасывается, таймер пересматривается."""
        self._slides = list(slides)
        self._index = 0
        if self._mounted:
            self._sync_timer()

    def _sync_timer(self):
        if self.count > 1:
            if self._timer is None:
                self._timer = RepeatingTimer(self.interval, self._on_timer).start()
        else:
            self._cancel_timer()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, timer: RepeatingTimer):
        # Срабатывание отмененного или чужого таймера игнорируется
        if not self._mounted or timer is not self._timer:
            return
        self.tick()

    async def __aenter__(self) -> "CarouselController[S]":
        return self.mount()

    async def __aexit__(self, exc_type, exc, tb):
        self.unmount()
