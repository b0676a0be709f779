from typing import Any

from pydantic import BaseModel


class TaskSchema(BaseModel):
    """A named endpoint with a strongly-typed output model.

    ``output_schema`` may be a model class or a parametrized list of one (e.g. ``List[TaskResponse]``).
    """

    name: str
    output_schema: Any = None
