"""
Shared Hypothesis settings for the RAPPOR property-based tests.
"""
# 说明：属性测试共享的 Hypothesis 配置。
# 职责：
# - 注册 ci 与 dev 两套 profile，由环境变量 HYPOTHESIS_PROFILE 选择
# - 关闭 too_slow 健康检查，HMAC-DRBG 宽输出用例单次执行较慢
# - 全局配置恢复夹具为函数作用域且与生成的样例无关，关闭对应健康检查

import os

from hypothesis import HealthCheck, settings

settings.register_profile("ci", max_examples=200, deadline=None, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
settings.register_profile("dev", max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "dev"))
