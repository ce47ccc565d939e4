"""
Pydantic 公共基类：Python 侧 snake_case，对外（Oracle JSON、HTTP）camelCase。
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """字段按 camelCase 别名序列化；构造时别名与字段名均可。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """不可变版本：实例创建后字段不可再赋值。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
