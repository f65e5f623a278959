"""Image serving endpoint."""

from fastapi import APIRouter, Response

from picfeed.api.v1.dependencies import ImageStoreDep

router = APIRouter(tags=["images"])


@router.get("/image/{post_id:int}.{ext}", response_class=Response)
async def get_image(post_id: int, ext: str, images: ImageStoreDep) -> Response:
    """Serve a post's image when ``ext`` matches its stored type."""
    image = images.image_bytes(post_id, ext)
    return Response(content=image.data, media_type=image.mime)
