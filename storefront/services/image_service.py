"""
Сервис для работы с изображениями.

Обеспечивает валидацию загружаемых файлов и оптимизацию изображений
для веба: уменьшение до заданных габаритов и перекодирование.
"""

import hashlib
import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from storefront.core.config import settings

logger = logging.getLogger(__name__)


class ImageValidationError(ValueError):
    """Файл не является допустимым изображением."""


@dataclass
class OptimizedImage:
    """Результат оптимизации изображения."""

    data: bytes
    filename: str
    mime_type: str
    original_size: int
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


class ImageService:
    """
    Сервис для работы с изображениями.

    Обеспечивает:
    - Валидацию загружаемых файлов
    - Уменьшение изображения до заданных габаритов без увеличения
    - Перекодирование в webp / jpeg / png
    """

    OUTPUT_FORMATS = {
        "webp": ("WEBP", "image/webp"),
        "jpeg": ("JPEG", "image/jpeg"),
        "png": ("PNG", "image/png"),
    }

    DEFAULT_MAX_SIZE = (1920, 1080)
    DEFAULT_QUALITY = 85

    def __init__(self, max_file_size: int = None, allowed_types: set = None):
        self.max_file_size = max_file_size or settings.MAX_IMAGE_SIZE
        self.allowed_types = allowed_types or settings.allowed_image_types

    def validate_file(self, filename: str, file_size: int) -> Tuple[bool, Optional[str]]:
        """
        Валидация загруженного файла.

        Args:
            filename: Имя файла
            file_size: Размер файла в байтах

        Returns:
            Tuple[bool, Optional[str]]: (валиден, сообщение об ошибке)
        """
        if file_size == 0:
            return False, "File is empty"

        if file_size > self.max_file_size:
            return False, f"File size exceeds maximum allowed size of {self.max_file_size} bytes"

        file_ext = Path(filename or "").suffix.lower().lstrip(".")
        if file_ext not in self.allowed_types:
            return False, (
                f"Unsupported file format: {file_ext or 'none'}. "
                f"Supported: {', '.join(sorted(self.allowed_types))}"
            )

        return True, None

    def optimize(
        self,
        content: bytes,
        filename: str,
        max_size: Tuple[int, int] = None,
        quality: int = None,
        output_format: str = "webp",
        progressive: bool = False,
    ) -> OptimizedImage:
        """
        Оптимизация изображения.

        Изображение вписывается в max_size с сохранением пропорций и
        никогда не увеличивается.

        Args:
            content: Исходные байты изображения
            filename: Исходное имя файла
            max_size: Максимальные размеры (width, height)
            quality: Качество сжатия (1-100)
            output_format: webp / jpeg / png (неизвестный формат - webp)
            progressive: Прогрессивный JPEG

        Returns:
            OptimizedImage: Оптимизированное изображение

        Raises:
            ImageValidationError: Если байты не являются изображением
        """
        max_size = max_size or self.DEFAULT_MAX_SIZE
        quality = quality or self.DEFAULT_QUALITY
        output_format = output_format if output_format in self.OUTPUT_FORMATS else "webp"
        pil_format, mime_type = self.OUTPUT_FORMATS[output_format]

        try:
            img = Image.open(io.BytesIO(content))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageValidationError(f"Invalid image file: {e}") from e

        with img:
            # JPEG не поддерживает прозрачность - подкладываем белый фон
            if pil_format == "JPEG" and img.mode in ("RGBA", "LA", "P"):
                if img.mode == "P":
                    img = img.convert("RGBA")
                background = Image.new("RGB", img.size, (255, 255, 255))
                background.paste(img, mask=img.split()[-1])
                img = background
            elif pil_format == "JPEG" and img.mode != "RGB":
                img = img.convert("RGB")

            img.thumbnail(max_size, Image.Resampling.LANCZOS)

            save_kwargs = {"optimize": True}
            if pil_format in ("WEBP", "JPEG"):
                save_kwargs["quality"] = quality
            if pil_format == "JPEG" and progressive:
                save_kwargs["progressive"] = True

            buffer = io.BytesIO()
            img.save(buffer, pil_format, **save_kwargs)
            width, height = img.size

        stem = Path(filename or "image").stem or "image"
        result = OptimizedImage(
            data=buffer.getvalue(),
            filename=f"{stem}.{output_format}",
            mime_type=mime_type,
            original_size=len(content),
            width=width,
            height=height,
        )
        logger.info(
            f"Optimized {filename}: {result.original_size} -> {result.size} bytes "
            f"({width}x{height} {output_format})"
        )
        return result

    def generate_path(self, folder: str, filename: str) -> str:
        """
        Генерация пути для сохранения изображения.

        Структура: {folder}/{hash}/{timestamp}_{filename}
        """
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
        hash_value = hashlib.md5(f"{filename}{stamp}".encode()).hexdigest()[:8]
        return f"{folder.strip('/')}/{hash_value}/{stamp}_{Path(filename).name}"


# Глобальный экземпляр сервиса
image_service = ImageService()
