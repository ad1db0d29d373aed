"""Conversion between gettext files and Zanata resources.

This module provides:
- pot_to_resource / po_to_translations: Local files → server JSON
- resource_to_pot / translations_to_po: Server JSON → local file content

Text flow ids are the md5 of the message id (prefixed by its context and a
NUL byte when the entry has one), which is how the server keys gettext
messages.
"""

from __future__ import annotations

import hashlib
from typing import Any

import polib

SOURCE_LANG = "en-US"

POT_ENTRY_HEADER = "pot-entry-header"
PO_HEADER = "po-header"
PO_TARGET_HEADER = "po-target-header"

FUZZY_STATES = ("NeedReview", "Rejected")


def text_flow_id(msgid: str, msgctxt: str | None = None) -> str:
    """Compute the id of the text flow holding a message."""
    key = f"{msgctxt}\u0000{msgid}" if msgctxt else msgid
    return hashlib.md5(key.encode("utf-8")).hexdigest()


def _header_extension(object_type: str, po: polib.POFile) -> dict[str, Any]:
    return {
        "object-type": object_type,
        "comment": po.header or "",
        "entries": [{"key": k, "value": v} for k, v in po.metadata.items()],
    }


def _find_extension(data: dict[str, Any], object_type: str) -> dict[str, Any]:
    for extension in data.get("extensions") or []:
        if extension.get("object-type") == object_type:
            return dict(extension)
    return {}


def _format_occurrence(occurrence: tuple[str, str]) -> str:
    path, line = occurrence
    return f"{path}:{line}" if line else path


def _parse_reference(reference: str) -> tuple[str, str]:
    path, sep, line = reference.rpartition(":")
    if sep and line.isdigit():
        return path, line
    return reference, ""


def _contents(data: dict[str, Any]) -> list[str]:
    """Read the message strings of a text flow or target."""
    if data.get("contents"):
        return list(data["contents"])
    return [data.get("content", "")]


# === Local → server ===


def pot_to_resource(po: polib.POFile, name: str, lang: str = SOURCE_LANG) -> dict[str, Any]:
    """Convert a source template into a source document.

    Args:
        po: Parsed .pot file.
        name: Document name on the server.
        lang: Source language of the messages.

    Returns:
        Resource dictionary ready to be PUT.
    """
    text_flows = []
    for entry in po:
        if entry.obsolete:
            continue
        contents = [entry.msgid, entry.msgid_plural] if entry.msgid_plural else [entry.msgid]
        text_flows.append(
            {
                "id": text_flow_id(entry.msgid, entry.msgctxt),
                "lang": lang,
                "plural": bool(entry.msgid_plural),
                "contents": contents,
                "extensions": [
                    {
                        "object-type": POT_ENTRY_HEADER,
                        "context": entry.msgctxt or "",
                        "references": [_format_occurrence(o) for o in entry.occurrences],
                        "flags": [f for f in entry.flags if f != "fuzzy"],
                        "extractedComment": entry.comment or "",
                    }
                ],
            }
        )

    return {
        "name": name,
        "contentType": "text/plain",
        "lang": lang,
        "type": "FILE",
        "extensions": [_header_extension(PO_HEADER, po)],
        "textFlows": text_flows,
    }


def po_to_translations(po: polib.POFile) -> dict[str, Any]:
    """Convert a locale file into translation targets.

    Untranslated entries are left out; fuzzy entries are sent for review.
    """
    targets = []
    for entry in po:
        if entry.obsolete:
            continue
        if entry.msgid_plural:
            contents = [entry.msgstr_plural[k] for k in sorted(entry.msgstr_plural)]
        else:
            contents = [entry.msgstr]
        if not any(contents):
            continue

        target: dict[str, Any] = {
            "resId": text_flow_id(entry.msgid, entry.msgctxt),
            "state": "NeedReview" if "fuzzy" in entry.flags else "Translated",
            "contents": contents,
        }
        if entry.tcomment:
            target["extensions"] = [{"object-type": "comment", "value": entry.tcomment}]
        targets.append(target)

    return {
        "extensions": [_header_extension(PO_TARGET_HEADER, po)],
        "textFlowTargets": targets,
    }


# === Server → local ===


def _new_file(header: dict[str, Any]) -> polib.POFile:
    po = polib.POFile(wrapwidth=0)
    po.header = header.get("comment", "")
    po.metadata = {e["key"]: e["value"] for e in header.get("entries", [])}
    po.metadata.setdefault("Content-Type", "text/plain; charset=UTF-8")
    po.metadata.setdefault("Content-Transfer-Encoding", "8bit")
    return po


def _source_entry(text_flow: dict[str, Any]) -> polib.POEntry:
    header = _find_extension(text_flow, POT_ENTRY_HEADER)
    contents = _contents(text_flow)
    entry = polib.POEntry(
        msgid=contents[0],
        msgctxt=header.get("context") or None,
        occurrences=[_parse_reference(r) for r in header.get("references", [])],
        flags=list(header.get("flags", [])),
        comment=header.get("extractedComment", ""),
    )
    if text_flow.get("plural") and len(contents) > 1:
        entry.msgid_plural = contents[1]
        entry.msgstr_plural = {0: "", 1: ""}
    return entry


def _dump(po: polib.POFile) -> bytes:
    return str(po).encode("utf-8")


def resource_to_pot(resource: dict[str, Any]) -> bytes:
    """Render a source document as .pot file content."""
    po = _new_file(_find_extension(resource, PO_HEADER))
    for text_flow in resource.get("textFlows", []):
        po.append(_source_entry(text_flow))
    return _dump(po)


def translations_to_po(
    resource: dict[str, Any],
    translations: dict[str, Any] | None,
    locale: str,
) -> bytes:
    """Render the translations of a document as .po file content.

    Args:
        resource: Source document (gives the message ids and their order).
        translations: Translations resource, or None when nothing is translated.
        locale: Server locale id, written to the Language header.
    """
    translations = translations or {}
    header = _find_extension(translations, PO_TARGET_HEADER) or _find_extension(
        resource, PO_HEADER
    )
    po = _new_file(header)
    po.metadata["Language"] = locale

    targets = {t["resId"]: t for t in translations.get("textFlowTargets", [])}
    for text_flow in resource.get("textFlows", []):
        entry = _source_entry(text_flow)
        target = targets.get(text_flow["id"])
        if target is not None and target.get("state") != "New":
            contents = _contents(target)
            if entry.msgid_plural:
                entry.msgstr_plural = dict(enumerate(contents))
            else:
                entry.msgstr = contents[0]
            if target.get("state") in FUZZY_STATES and "fuzzy" not in entry.flags:
                entry.flags.append("fuzzy")
            comment = _find_extension(target, "comment")
            if comment.get("value"):
                entry.tcomment = comment["value"]
        po.append(entry)
    return _dump(po)
