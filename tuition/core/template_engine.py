from __future__ import annotations

from jinja2 import Environment, StrictUndefined


class TemplateEngine:
    def __init__(self) -> None:
        self.env = Environment(undefined=StrictUndefined, autoescape=False)

    def render(self, body: str, context: dict[str, object]) -> str:
        return self.env.from_string(body).render(**context)


template_engine = TemplateEngine()
