"""
API endpoints оптимизации изображений.
"""

from typing import Literal, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from storefront.services.image_service import ImageValidationError, image_service

router = APIRouter()


@router.post("/optimize")
async def optimize_image(
    file: Optional[UploadFile] = File(None),
    max_width: int = Form(1920, ge=1, le=10000),
    max_height: int = Form(1080, ge=1, le=10000),
    quality: int = Form(85, ge=1, le=100),
    format: Literal["webp", "jpeg", "png"] = Form("webp"),
    progressive: bool = Form(False),
):
    """
    Оптимизировать изображение для веба.

    Изображение вписывается в max_width x max_height без увеличения и
    перекодируется в указанный формат. В ответе - байты результата.

    Args:
        file: Исходное изображение
        max_width: Максимальная ширина
        max_height: Максимальная высота
        quality: Качество сжатия (1-100)
        format: Формат результата (webp/jpeg/png)
        progressive: Прогрессивный JPEG

    Returns:
        Response: Оптимизированное изображение с заголовками
        X-Filename, X-Original-Size, X-Optimized-Size

    Raises:
        HTTPException: Если файл не передан или не является изображением
    """
    if file is None:
        raise HTTPException(400, detail="No file provided")

    content = await file.read()
    if not content:
        raise HTTPException(400, detail="No file provided")

    try:
        optimized = image_service.optimize(
            content,
            file.filename,
            max_size=(max_width, max_height),
            quality=quality,
            output_format=format,
            progressive=progressive,
        )
    except ImageValidationError as e:
        raise HTTPException(400, detail=str(e))

    return Response(
        content=optimized.data,
        media_type=optimized.mime_type,
        headers={
            "X-Filename": optimized.filename,
            "X-Original-Size": str(optimized.original_size),
            "X-Optimized-Size": str(optimized.size),
        },
    )
