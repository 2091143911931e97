"""应用常量定义."""

from pathlib import Path

# ===================
# 应用信息
# ===================
APP_NAME = "AppShot 应用商店截图编辑器"
APP_VERSION = "0.3.0"
APP_AUTHOR = "AppShot"

# ===================
# 路径常量
# ===================
# 应用数据目录
APP_DATA_DIR = Path.home() / ".appshot"

# 日志目录
LOG_DIR = APP_DATA_DIR / "logs"

# 作品保存目录
COMPOSITIONS_DIR = APP_DATA_DIR / "compositions"

# ===================
# 画布设置
# ===================
# 单个屏幕的逻辑尺寸（iPhone 竖屏）
SCREEN_WIDTH = 375
SCREEN_HEIGHT = 667

# 多屏横向排列时的间距（视口像素）
SCREEN_GAP = 32

# 模板背景层的标准全画布矩形
CANONICAL_CANVAS_WIDTH = 1242
CANONICAL_CANVAS_HEIGHT = 2688

# ===================
# 视口设置
# ===================
MIN_ZOOM = 0.25
MAX_ZOOM = 2.0
ZOOM_STEP = 0.25
DEFAULT_ZOOM = 1.0

# ===================
# 屏幕与图层默认值
# ===================
DEFAULT_SCREEN_BACKGROUND = "#FFFFFF"
SCREEN_NAME_FORMAT = "Screen {index}"

# 工具栏背景色色板
BACKGROUND_SWATCHES = (
    "#000000",
    "#FFFFFF",
    "#3B82F6",
    "#EF4444",
    "#10B981",
    "#F59E0B",
    "#8B5CF6",
    "#EC4899",
)

DEFAULT_TEXT_CONTENT = "New Text"
DEFAULT_TEXT_GEOMETRY = (100.0, 250.0, 200.0, 40.0)  # x, y, width, height
DEFAULT_TEXT_FONT_SIZE = 20.0
DEFAULT_TEXT_COLOR = "#000000"

DEFAULT_IMAGE_GEOMETRY = (100.0, 250.0, 175.0, 175.0)

# 模板文字默认字体
DEFAULT_FONT_FAMILY = "Inter, -apple-system, BlinkMacSystemFont, sans-serif"

# ===================
# 撤销/重做
# ===================
DEFAULT_HISTORY_DEPTH = 50
