import uuid
from typing import Dict, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from ..models.request import FormUrlEncodedBody, KeyValuePair, NoBody, RawBody, RequestDefinition
from ..models.template import RequestTemplate, TemplateApplicationResult, TemplateCategory
from ..templates.builtin import get_builtin_templates
from ..utils.logger import Logger
from .json_store import JsonStore, StoreError

TEMPLATES_FILE = "templates.json"

_template_list = TypeAdapter(List[RequestTemplate])


class TemplateError(Exception):
    pass


class TemplateNotFoundError(TemplateError):
    def __init__(self, template_id: uuid.UUID):
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class MissingVariablesError(TemplateError):
    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required variables: {missing}")
        self.missing = missing


class CannotModifyBuiltinError(TemplateError):
    def __init__(self):
        super().__init__("Cannot modify builtin template")


class TemplateManager:
    """
    Builtin templates plus user-defined ones persisted to ``templates.json``.

    Builtins are fixed at construction and kept apart from the custom list;
    every mutating operation checks an id against them first.
    """

    def __init__(self, store: JsonStore):
        self.store = store
        self._builtin = get_builtin_templates()
        self._builtin_ids = frozenset(template.id for template in self._builtin)
        self._custom: List[RequestTemplate] = []
        self.logger = Logger.get_logger(__name__)

    def load_custom_templates(self) -> None:
        try:
            data = self.store.read_json(TEMPLATES_FILE)
            if data is None:
                return
            self._custom = _template_list.validate_python(data)
        except (StoreError, ValidationError) as e:
            self.logger.error(f"Error loading custom templates: {e}")
            raise TemplateError(f"Serialization error: {e}") from e

    def save_custom_templates(self) -> None:
        try:
            self.store.write_json(TEMPLATES_FILE, _template_list.dump_python(self._custom, mode="json"))
        except StoreError as e:
            self.logger.error(f"Error saving custom templates: {e}")
            raise TemplateError(str(e)) from e

    def get_all_templates(self) -> List[RequestTemplate]:
        # Built-ins are shared by every lookup, so callers get their own copies
        return [*(template.model_copy(deep=True) for template in self._builtin), *self._custom]

    def get_templates_by_category(self) -> Dict[TemplateCategory, List[RequestTemplate]]:
        grouped: Dict[TemplateCategory, List[RequestTemplate]] = {}
        for template in self.get_all_templates():
            grouped.setdefault(template.category, []).append(template)
        return grouped

    def get_template(self, template_id: uuid.UUID) -> Optional[RequestTemplate]:
        return next((t for t in self.get_all_templates() if t.id == template_id), None)

    def get_template_by_name(self, name: str) -> Optional[RequestTemplate]:
        return next((t for t in self.get_all_templates() if t.name == name), None)

    def is_builtin(self, template_id: uuid.UUID) -> bool:
        return template_id in self._builtin_ids

    def add_custom_template(self, template: RequestTemplate) -> None:
        if self.is_builtin(template.id):
            self.logger.warning(f"⚠️ Refusing to add builtin template '{template.name}' as custom")
            raise CannotModifyBuiltinError()
        self._custom.append(template)

    def update_custom_template(self, template: RequestTemplate) -> None:
        if self.is_builtin(template.id):
            self.logger.warning(f"⚠️ Refusing to modify builtin template '{template.name}'")
            raise CannotModifyBuiltinError()
        for index, existing in enumerate(self._custom):
            if existing.id == template.id:
                self._custom[index] = template
                return
        raise TemplateNotFoundError(template.id)

    def delete_custom_template(self, template_id: uuid.UUID) -> None:
        if self.is_builtin(template_id):
            self.logger.warning(f"⚠️ Refusing to delete builtin template {template_id}")
            raise CannotModifyBuiltinError()
        self._custom = [t for t in self._custom if t.id != template_id]

    def create_from_template(
        self, template_id: uuid.UUID, variables: Mapping[str, str], name: str
    ) -> TemplateApplicationResult:
        """
        Materialize a request from a template.

        Provided values win over declared defaults. Required variables with
        neither are reported in ``missing_variables`` and their tokens stay in
        the request; this is never an error.

        Raises:
            TemplateNotFoundError: if no template has ``template_id``.
        """
        template = self._require(template_id)

        values = {v.name: v.default_value for v in template.variables if v.default_value is not None}
        values.update(variables)
        missing = [v.name for v in template.variables if v.required and v.name not in values]

        match template.body:
            case RawBody(content=content, content_type=content_type):
                body = RawBody(content=self._substitute(content, values), content_type=content_type)
            case FormUrlEncodedBody(fields=fields):
                body = FormUrlEncodedBody(fields=self._substitute_pairs(fields, values))
            case _:
                body = NoBody()

        request = RequestDefinition(
            name=name,
            method=template.method,
            url=self._substitute(template.url_template, values),
            headers=self._substitute_pairs(template.headers, values),
            query_params=self._substitute_pairs(template.query_params, values),
            body=body,
        )
        return TemplateApplicationResult(request=request, missing_variables=missing)

    def validate_template_variables(self, template_id: uuid.UUID, variables: Mapping[str, str]) -> None:
        """
        Raises:
            TemplateNotFoundError: if no template has ``template_id``.
            MissingVariablesError: if a required variable has no value and no default.
        """
        template = self._require(template_id)
        missing = [
            v.name for v in template.variables if v.required and v.name not in variables and v.default_value is None
        ]
        if missing:
            raise MissingVariablesError(missing)

    def _require(self, template_id: uuid.UUID) -> RequestTemplate:
        template = self.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    @staticmethod
    def _substitute(text: str, values: Mapping[str, str]) -> str:
        for key, value in values.items():
            text = text.replace(f"{{{{{key}}}}}", value)
        return text

    @classmethod
    def _substitute_pairs(cls, pairs: List[KeyValuePair], values: Mapping[str, str]) -> List[KeyValuePair]:
        return [
            pair.model_copy(update={"key": cls._substitute(pair.key, values), "value": cls._substitute(pair.value, values)})
            for pair in pairs
        ]
