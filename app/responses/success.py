from .base import build_response


def success_response(message: str = None, data=None):
    return build_response(200, message=message, data=data)


def created_response(message: str = None, data=None):
    return build_response(201, message=message, data=data)


def data_response(data=None):
    return build_response(200, data=data)


def paginated_response(data, total: int, page: int, limit: int):
    total_pages = (total + limit - 1) // limit if limit else 0
    return build_response(
        200,
        data=data,
        pagination={"totalPages": total_pages, "currentPage": page, "total": total},
    )


def empty_response():
    return build_response(204)
