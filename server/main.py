# server/main.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from protocol.feed import FeedStore
from protocol.types import F_TEXT, Message
from server.config import settings
from server.feed_store import InMemoryFeed

logger = logging.getLogger(__name__)


class PostMessageRequest(BaseModel):
    """Body of POST /messages. A client-sent message-id is ignored, the store assigns ids."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: str
    author: str
    text: str = Field(alias=F_TEXT)
    attachment: Optional[str] = None
    signature: str

    def to_message(self) -> Message:
        return Message(
            date=self.date,
            author=self.author,
            text=self.text,
            attachment=self.attachment,
            signature=self.signature,
        )


def create_app(store: Optional[FeedStore] = None) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Append-only feed of signed messages",
        version="1.0.0",
    )
    app.state.feed = store if store is not None else InMemoryFeed()

    @app.post("/messages")
    def post_message(body: PostMessageRequest, request: Request) -> Dict[str, Any]:
        stored = request.app.state.feed.publish(body.to_message())
        logger.info("stored message %s from %r", stored.id, stored.author)
        return stored.to_wire()

    @app.get("/messages")
    def list_messages(
        request: Request,
        count: Optional[int] = Query(None, ge=0),
        limit: Optional[int] = Query(None, ge=0),
        next_id: Optional[int] = Query(None, ge=0, alias="next"),
    ) -> List[Dict[str, Any]]:
        feed = request.app.state.feed
        if limit is not None or next_id is not None:
            if limit is None:
                limit = len(feed.latest())
            messages = feed.page(limit, next_id)
        else:
            messages = feed.latest(count)
        return [m.to_wire() for m in messages]

    @app.get("/health")
    def health_check(request: Request) -> Dict[str, Any]:
        return {"status": "healthy", "messages": len(request.app.state.feed.latest())}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting feed store on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
