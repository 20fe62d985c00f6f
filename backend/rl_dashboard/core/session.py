from rl_dashboard.core.config import settings
from rl_dashboard.models.task import Submitter

# 平台不做认证，当前会话的提交者直接来自配置
async def get_current_submitter() -> Submitter:
    return Submitter(
        name=settings.CURRENT_USER_NAME,
        avatar_url=settings.CURRENT_USER_AVATAR,
    )
