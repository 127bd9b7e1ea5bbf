from typing import Optional

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from tscatalog.kinds import NodeFlags


class ExtractorSettings(BaseSettings):
    """Settings for declaration extraction."""

    model_config = SettingsConfigDict(env_prefix="TSCATALOG_")

    root_context: str = Field(
        default="root",
        description=(
            "Context of top-level declarations when no module name is given. Plain "
            "typed variables are always recorded under this context."
        ),
    )
    namespace_context_prefix: str = Field(
        default="npm$namespace$",
        description="Prefix of the synthesized context used for namespace bodies.",
    )
    import_placeholder_prefix: str = Field(
        default="npm$import$",
        description="Prefix of the synthesized binding name of side-effect-only imports.",
    )
    namespace_flags: int = Field(
        default=int(NodeFlags.NAMESPACE | NodeFlags.NESTED_NAMESPACE),
        description=(
            "Node flag bits marking a module declaration as a namespace. Adjust when "
            "walking trees from a parser that numbers its flags differently."
        ),
    )
    kind_table_path: Optional[str] = Field(
        default=None,
        description=(
            "Optional JSON file mapping numeric syntax kinds to names, e.g. a dump "
            "of `ts.SyntaxKind`. The bundled table is used when unset."
        ),
    )
    tsx: bool = Field(
        default=False,
        description="Parse sources with the TSX grammar. `.tsx` files always use it.",
    )
    strict: bool = Field(
        default=False,
        description="Fail on sources the parser reports syntax errors for.",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # `json_file` is only read when the JSON source is registered
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(
    env_prefix: Optional[str] = None,
    env_file: Optional[str] = None,
    json_file: Optional[str] = None,
    **kwargs,
) -> ExtractorSettings:
    config_dict = SettingsConfigDict(
        env_prefix=env_prefix if env_prefix is not None else "TSCATALOG_",
        env_file=env_file,
        json_file=json_file,
    )

    class Settings(ExtractorSettings):
        model_config = config_dict

    return Settings(**kwargs)
