from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from typing import Optional, Any
from pydantic import BaseModel


def build_response(
    status_code: int,
    success: bool = True,
    message: str = None,
    data: Any = None,
    pagination: Optional[dict] = None,
    errors: Any = None,
) -> Response:
    if status_code == 204:
        return Response(status_code=204)

    response = {"success": success}

    if message is not None:
        response["message"] = message

    if data is not None:
        # If data is a Pydantic model, convert it to a dictionary
        if isinstance(data, BaseModel):
            response["data"] = data.model_dump(mode="json")
        # If data is a list of Pydantic models, convert each to a dictionary
        elif isinstance(data, list) and all(isinstance(item, BaseModel) for item in data):
            response["data"] = [item.model_dump(mode="json") for item in data]
        else:
            response["data"] = jsonable_encoder(data)

    if pagination is not None:
        response["pagination"] = pagination

    if errors is not None:
        response["errors"] = jsonable_encoder(errors)

    return JSONResponse(
        content=response,
        status_code=status_code,
        media_type="application/json"
    )
