# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Any, ClassVar, Iterable, List, Mapping, Optional, Tuple

from ..exceptions import SchemaDefinitionError
from ..schema.builder import build_schema
from ..schema.external import Validator, ValidatorFailure
from ..schema.model import Schema
from .errors import StructuredError
from .evaluator import evaluate


class SchemaValidator(Validator):
    """External validator whose rules are declared as a Schema.

    Subclasses either assign ``schema`` directly or provide a ``define``
    static method, which is built once when the class is created::

        class AddressValidator(SchemaValidator):
            @staticmethod
            def define(s):
                s.attribute("street")
                s.attribute("city")
                s.rule("street", "city", presence=True)
    """

    schema: ClassVar[Optional[Schema]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        define = cls.__dict__.get("define")
        if define is not None:
            cls.schema = build_schema(getattr(cls, "define"))

    def __init__(self, params: Mapping[str, Any], *, max_depth: Optional[int] = None):
        super().__init__(params)
        self.max_depth = max_depth
        self._errors: Optional[Tuple[StructuredError, ...]] = None

    @classmethod
    def run(cls, params: Mapping[str, Any], *, max_depth: Optional[int] = None) -> List[ValidatorFailure]:
        return list(cls(params, max_depth=max_depth).validate())

    @classmethod
    def get_schema(cls) -> Schema:
        if cls.schema is None:
            raise SchemaDefinitionError(f"{cls.__name__} does not define a schema")
        return cls.schema

    @property
    def errors(self) -> Tuple[StructuredError, ...]:
        if self._errors is None:
            aggregator = evaluate(self.get_schema(), self.params, "", max_depth=self.max_depth)
            self._errors = aggregator.errors
        return self._errors

    def is_valid(self) -> bool:
        return not self.errors

    def validate(self) -> Iterable[ValidatorFailure]:
        for error in self.errors:
            yield error.path, error.message
