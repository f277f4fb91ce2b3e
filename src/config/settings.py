"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use VUEGISTER_ prefix (e.g., VUEGISTER_MAPS=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use VUEGISTER_ prefix.

    Examples:
        VUEGISTER_MAPS=true
        VUEGISTER_EXTENSION=.vue
        VUEGISTER_PLUGIN_ENTRYPOINT_GROUP=vuegister.plugins
    """

    model_config = SettingsConfigDict(
        env_prefix="VUEGISTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Loader configuration
    extension: str = Field(
        default=".vue",
        description="File suffix handled by the loader hook",
    )

    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to read component and src-referenced files",
    )

    maps: bool = Field(
        default=False,
        description="Generate source maps for loaded components by default",
    )

    # Language defaults for sections without a lang attribute
    script_lang: str = Field(
        default="js",
        description="Built-in scripting language (passed through, optionally mapped)",
    )

    template_lang: str = Field(
        default="html",
        description="Built-in markup language (passed through, never mapped)",
    )

    # Plugin resolution
    plugin_module_prefix: str = Field(
        default="vuegister_plugin_",
        description="Import name prefix for plugin modules (prefix + lang)",
    )

    plugin_package_prefix: str = Field(
        default="vuegister-plugin-",
        description="Distribution name prefix for plugins, used in install hints",
    )

    plugin_entrypoint_group: str = Field(
        default="vuegister.plugins",
        description="Entry point group scanned for installed plugins",
    )

    def pluginModule_make(self, lang: str) -> str:
        """
        Build the conventional import name of the plugin for a language.

        Example:
            >>> AppSettings().pluginModule_make('coffee')
            'vuegister_plugin_coffee'
        """
        return f"{self.plugin_module_prefix}{lang}"

    def pluginPackage_make(self, lang: str) -> str:
        """
        Build the conventional distribution name of the plugin for a language.

        Example:
            >>> AppSettings().pluginPackage_make('coffee')
            'vuegister-plugin-coffee'
        """
        return f"{self.plugin_package_prefix}{lang}"

    def langDefaults_get(self) -> dict[str, str]:
        """Default language per section tag"""
        return {"script": self.script_lang, "template": self.template_lang}


# Singleton instance - import this in your code
appsettings = AppSettings()
