from py2hlsl.shader import ComputeShader, ReadWriteBuffer, ThreadIds
from py2hlsl.sources import (
    ComputeShaderSource,
    ShaderSourceNotFoundError,
    clear_shader_sources,
    get_shader_source,
    load_generated_sources,
    register_shader_source,
    registered_sources,
    shader_source_for,
)
from py2hlsl.types import (
    Bool,
    Bool2,
    Bool3,
    Bool4,
    Double,
    Double2,
    Double3,
    Double4,
    Double2x2,
    Double2x3,
    Double2x4,
    Double3x2,
    Double3x3,
    Double3x4,
    Double4x2,
    Double4x3,
    Double4x4,
    Float,
    Float2,
    Float3,
    Float4,
    Float2x2,
    Float2x3,
    Float2x4,
    Float3x2,
    Float3x3,
    Float3x4,
    Float4x2,
    Float4x3,
    Float4x4,
    Int,
    Int2,
    Int3,
    Int4,
    Matrix3x3,
    Matrix4x4,
    UInt,
    UInt2,
    UInt3,
    UInt4,
    Vector2,
    Vector3,
    Vector4,
    default,
)

__version__ = "0.1.0"


__all__ = [
    "Bool",
    "Bool2",
    "Bool3",
    "Bool4",
    "ComputeShader",
    "ComputeShaderSource",
    "Double",
    "Double2",
    "Double2x2",
    "Double2x3",
    "Double2x4",
    "Double3",
    "Double3x2",
    "Double3x3",
    "Double3x4",
    "Double4",
    "Double4x2",
    "Double4x3",
    "Double4x4",
    "Float",
    "Float2",
    "Float2x2",
    "Float2x3",
    "Float2x4",
    "Float3",
    "Float3x2",
    "Float3x3",
    "Float3x4",
    "Float4",
    "Float4x2",
    "Float4x3",
    "Float4x4",
    "Int",
    "Int2",
    "Int3",
    "Int4",
    "Matrix3x3",
    "Matrix4x4",
    "ReadWriteBuffer",
    "ShaderSourceNotFoundError",
    "ThreadIds",
    "UInt",
    "UInt2",
    "UInt3",
    "UInt4",
    "Vector2",
    "Vector3",
    "Vector4",
    "clear_shader_sources",
    "default",
    "get_shader_source",
    "load_generated_sources",
    "register_shader_source",
    "registered_sources",
    "shader_source_for",
]
