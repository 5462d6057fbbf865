import re
from typing import Dict, List, Mapping

from ..models.request import FormUrlEncodedBody, KeyValuePair, NoBody, RawBody, RequestDefinition

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")


class Interpolator:
    """
    Resolves ``{{variable}}`` placeholders inside a request.

    Resolution is best-effort: identifiers missing from the variable map are left
    verbatim, so applying it twice with the same map changes nothing.
    """

    @staticmethod
    def replace(text: str, variables: Mapping[str, str]) -> str:
        """
        Substitute every known placeholder in ``text``.

        Strings without ``{{`` are returned as the very same object, which keeps
        large placeholder-free bodies from being copied.
        """
        if "{{" not in text:
            return text

        def _substitute(match: re.Match) -> str:
            value = variables.get(match.group(1))
            return match.group(0) if value is None else value

        return PLACEHOLDER_PATTERN.sub(_substitute, text)

    @classmethod
    def resolve(cls, request: RequestDefinition, variables: Mapping[str, str]) -> RequestDefinition:
        """Return a resolved copy of ``request``; the input is never mutated."""
        match request.body:
            case RawBody(content=content, content_type=content_type):
                body = RawBody(content=cls.replace(content, variables), content_type=content_type)
            case FormUrlEncodedBody(fields=fields):
                body = FormUrlEncodedBody(fields=cls._resolve_pairs(fields, variables))
            case _:
                body = NoBody()

        return request.model_copy(
            update={
                "url": cls.replace(request.url, variables),
                "headers": cls._resolve_pairs(request.headers, variables),
                "query_params": cls._resolve_pairs(request.query_params, variables),
                "body": body,
            }
        )

    @staticmethod
    def find_placeholders(request: RequestDefinition) -> List[str]:
        """Identifiers referenced anywhere in ``request``, in first-seen order."""
        texts = [request.url]
        for pair in [*request.headers, *request.query_params]:
            texts.extend((pair.key, pair.value))
        match request.body:
            case RawBody(content=content):
                texts.append(content)
            case FormUrlEncodedBody(fields=fields):
                for pair in fields:
                    texts.extend((pair.key, pair.value))

        found: Dict[str, None] = {}
        for text in texts:
            for name in PLACEHOLDER_PATTERN.findall(text):
                found.setdefault(name)
        return list(found)

    @classmethod
    def _resolve_pairs(cls, pairs: List[KeyValuePair], variables: Mapping[str, str]) -> List[KeyValuePair]:
        return [
            pair.model_copy(
                update={"key": cls.replace(pair.key, variables), "value": cls.replace(pair.value, variables)}
            )
            for pair in pairs
        ]
