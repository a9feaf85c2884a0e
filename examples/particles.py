"""Particle Integration Compute Shader Example

This example advances a buffer of particles by one time step. Each thread
owns one particle: it applies gravity and drag to the velocity, integrates
the position and bounces the particle off the floor.

Key concepts demonstrated:
1. Structured buffers declared as ``ReadWriteBuffer[T]`` fields
2. Helper methods called from ``execute``
3. Vector types, swizzles and intrinsics (``saturate``, ``length``)
4. Typed zero values with ``default``

To generate the HLSL sources:
    # Print the translation of every method
    py2hlsl show examples/particles.py
    # Write one generated module per method
    py2hlsl generate examples/ -o build/shader_sources
"""

from py2hlsl import ComputeShader, Float3, ReadWriteBuffer, ThreadIds, default
from py2hlsl.intrinsics import length, saturate


class Particles(ComputeShader):
    """Integrates particle positions and velocities."""

    positions: ReadWriteBuffer[Float3]
    velocities: ReadWriteBuffer[Float3]
    dt: float
    drag: float

    def execute(self, ids: ThreadIds) -> None:
        i = ids.x
        velocity: Float3 = self.velocities[i]
        velocity.y += -9.81 * self.dt
        velocity = velocity * (1.0 - saturate(self.drag * self.dt))

        position = self.positions[i] + velocity * self.dt
        if position.y < 0.0:
            position.y = -position.y
            velocity.y = -velocity.y * 0.5

        self.positions[i] = position
        self.velocities[i] = self.damp(velocity)

    def damp(self, velocity: Float3) -> Float3:
        # Particles at rest stay at rest.
        if length(velocity) < 0.001:
            return default
        return velocity
