from skin_moderation.cli import app

app(prog_name="skin-moderation")
