class TaskValidationError(ValueError):
    """
    任务提交前的校验失败，例如任务名称为空、配置缺少必填字段。
    提交会被拦截，不会写入任务仓库。
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
