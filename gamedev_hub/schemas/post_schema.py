from pydantic import BaseModel


class PostOut(BaseModel):
    id: int
    associated_user: int
    title: str
    description: str
    link: str

    model_config = {"from_attributes": True}
