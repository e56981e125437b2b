"""Shape journal records into payloads for the AI analyst.

Image data never goes into the JSON history; each record instead carries
a short reference, and the images themselves travel as separate inline
parts labeled with the record id.
"""

import json
import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from tradejournal.models import AttachmentLabel, TradeRecord, parse_data_uri

logger = logging.getLogger(__name__)

MIN_SWEEP_NOTES = 3

NO_IMAGES_REFERENCE = "No images provided for this trade."

NOT_ENOUGH_SWEEP_NOTES = (
    "There aren't enough 'SL Sweep Notes' to perform a meaningful analysis. "
    "Please add more detailed notes to your losing trades to use this feature."
)


class ImagePart(BaseModel):
    """One attachment, ready to be sent as an inline image."""

    trade_id: str
    trade_date: str
    label: AttachmentLabel
    mime_type: str
    data: str = Field(..., description="Base64 image payload")

    model_config = {"frozen": True}

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class HistoryPayload(BaseModel):
    """Full-history request: one text prompt plus labeled images."""

    prompt: str
    images: list[ImagePart] = Field(default_factory=list)

    model_config = {"frozen": True}

    def to_input_items(self) -> list[dict[str, Any]]:
        """Render as a single multimodal user message for the Agents SDK."""
        content: list[dict[str, Any]] = [{"type": "input_text", "text": self.prompt}]
        current_trade = None
        for image in self.images:
            if image.trade_id != current_trade:
                current_trade = image.trade_id
                content.append({
                    "type": "input_text",
                    "text": f"Images for trade ID {image.trade_id} on {image.trade_date}:",
                })
            content.append({"type": "input_text", "text": f"--- {image.label.display_name} ---"})
            content.append({"type": "input_image", "image_url": image.data_uri, "detail": "auto"})
        return [{"role": "user", "content": content}]


class SweepNotesPayload(BaseModel):
    """Stop-sweep request built from the trader's sweep notes."""

    notes: list[str]
    prompt: str

    model_config = {"frozen": True}


def image_reference(record: TradeRecord) -> str:
    """Text standing in for a record's images inside the JSON history."""
    if not record.attachments:
        return NO_IMAGES_REFERENCE
    labels = ", ".join(label.value for label in record.attachments)
    return f"See accompanying images for trade ID {record.id} ({labels})"


def project_record(record: TradeRecord) -> dict[str, Any]:
    """JSON-ready view of a record with attachments replaced by a reference."""
    data = record.model_dump(mode="json", exclude={"attachments"}, exclude_none=True)
    data["image_references"] = image_reference(record)
    return data


def collect_images(records: Iterable[TradeRecord]) -> list[ImagePart]:
    """Every attachment as an inline image part, grouped by record."""
    parts = []
    for record in records:
        for label, uri in record.attachments.items():
            parsed = parse_data_uri(uri)
            if parsed is None:
                logger.warning(
                    "Skipping %s image of trade %s: not a base64 data URI",
                    label.value,
                    record.id,
                )
                continue
            mime_type, data = parsed
            parts.append(ImagePart(
                trade_id=record.id,
                trade_date=record.date.isoformat(),
                label=label,
                mime_type=mime_type,
                data=data,
            ))
    return parts


def project_history(records: Iterable[TradeRecord], question: str) -> HistoryPayload:
    """Build the full-history payload for a free-text question.

    Args:
        records: Records to include, usually the whole journal.
        question: The trader's question.

    Returns:
        Prompt text with the JSON history, plus the images to send.
    """
    records = list(records)
    history = json.dumps([project_record(r) for r in records], indent=2)
    prompt = (
        f"Here is the trader's history:\n{history}\n\n"
        "Based on this data and any accompanying images, please answer the "
        f'following question: "{question}"'
    )
    return HistoryPayload(prompt=prompt, images=collect_images(records))


def collect_sweep_notes(records: Iterable[TradeRecord]) -> list[str]:
    """Trimmed stop-sweep notes, skipping empty and whitespace-only ones."""
    notes = []
    for record in records:
        text = getattr(record, "stop_sweep_notes", None)
        if text and text.strip():
            notes.append(text.strip())
    return notes


def project_sweep_notes(records: Iterable[TradeRecord]) -> Optional[SweepNotesPayload]:
    """Build the stop-sweep payload.

    Returns:
        None when fewer than ``MIN_SWEEP_NOTES`` notes are available.
    """
    notes = collect_sweep_notes(records)
    if len(notes) < MIN_SWEEP_NOTES:
        return None

    bullet_list = "\n".join(f"- {note}" for note in notes)
    prompt = (
        "Here are the trader's notes on the candles that triggered their stop "
        f"losses:\n\n{bullet_list}\n\nPlease analyze these for recurring patterns."
    )
    return SweepNotesPayload(notes=notes, prompt=prompt)
