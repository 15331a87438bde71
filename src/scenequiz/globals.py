from fastapi.templating import Jinja2Templates

from .config import settings
from .scenes import SceneLibrary

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)
scene_library = SceneLibrary(settings.SCENES_DIR)
