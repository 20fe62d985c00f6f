from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "RL_Task_Dashboard"
    API_PREFIX: str = "/api"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # 前端开发服务器地址
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:5174"]

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 当前会话用户 (没有认证，直接由配置提供)
    CURRENT_USER_NAME: str = "Current User"
    CURRENT_USER_AVATAR: str = "https://images.unsplash.com/photo-1519244703995-f4e0f30006d5?w=32&h=32&fit=crop&crop=face"

    SEED_MOCK_TASKS: bool = True # 启动时是否写入两条历史示例任务
    MOCK_SERIES_LENGTH: int = 50 # 模拟曲线的点数

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
