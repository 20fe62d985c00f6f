from fastapi import APIRouter
from rl_dashboard.api.endpoints import task, task_form

# 创建主 API 路由器
api_router = APIRouter()

# 将各个模块的路由器包含到主路由器中
# prefix 参数为该路由器下的所有路由添加前缀
# tags 参数用于 OpenAPI (Swagger UI) 文档中的分组
api_router.include_router(task.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(task_form.router, prefix="/task_forms", tags=["task_forms"])
