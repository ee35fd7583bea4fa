from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Photo Strip Booth"
    app_description: str = "Capture a few snapshots and download them as a decorated photo strip"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000

    camera_index: int = 0
    camera_width: int = 1280
    camera_height: int = 720

    exports_dir: str = "exports"

    template_slots: dict = {
        "classic": 3,
        "quad": 4,
        "duo": 2
    }

    # Strip geometry, in output pixels
    strip_width: int = 500
    frame_inset: int = 30
    frame_gap: int = 80
    first_frame_top: int = 120
    header_allowance: int = 200
    landscape_frame_height: int = 350
    portrait_frame_ratio: float = 1.2
    portrait_layout: bool = False
    border_width: int = 8

    header_text: str = "Happy Moments"
    header_baseline: int = 60
    header_font_size: int = 36
    footer_offset: int = 30
    footer_font_size: int = 20
    text_color: str = "#ffffff"

    background_color: str = "#000000"
    pattern_opacity: float = 0.15
    default_border_color: str = "#D4AF37"

    class Config:
        env_file = ".env"
        env_prefix = "STRIPBOOTH_"


settings = Settings()
