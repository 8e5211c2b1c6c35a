"""Routes for parsing NewsML-G2 documents on demand."""

from fastapi import APIRouter, Body, HTTPException, Request, status
from pydantic import BaseModel

from newsml_g2.services.newsml.chooser import ParserChooser
from newsml_g2.services.newsml.loader import DocumentLoadError, load_document

router = APIRouter(prefix="/newsml", tags=["newsml"])


class TopicModel(BaseModel):
    name: str
    qcode: str


class MediaModel(BaseModel):
    href: str


class ArticleModel(BaseModel):
    guid: str
    version: str
    timestamp: int | None
    publish_date: int | None
    title: str
    subtitle: str
    copyright_holder: str
    copyright_notice: str
    mediatopics: list[TopicModel]
    locations: list[TopicModel]
    content: str
    multimedia: list[MediaModel]
    source: str
    source_uri: str
    filename: str


class ParseResponse(BaseModel):
    ok: bool
    dialect: str
    article: ArticleModel


@router.post("/parse", response_model=ParseResponse, status_code=status.HTTP_200_OK)
def parse(
    request: Request,
    content: bytes = Body(..., media_type="application/xml"),
    filename: str = "",
) -> ParseResponse:
    """Parse a raw NewsML-G2 XML body into a normalized article."""
    try:
        document = load_document(content)
    except DocumentLoadError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    chooser: ParserChooser = request.app.state.chooser
    parser = chooser.choose_parser(document)
    if parser is None:
        raise HTTPException(
            status_code=422,
            detail="Unsupported document, no appropriate parser found.",
        )

    record = parser.parse(document).with_filename(filename)
    return ParseResponse(ok=True, dialect=parser.name, article=ArticleModel(**record.to_dict()))
