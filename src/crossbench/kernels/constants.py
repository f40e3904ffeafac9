"""Scene and hash constants shared by the interpreted and compiled kernels."""

# Hash diffusion (32-bit unsigned arithmetic)
HASH_SEED = 0x12345678
HASH_BLOCK_STRIDE = 0x9E3779B9
HASH_MULTIPLIER = 33
HASH_ROTATION = 5
MASK32 = 0xFFFFFFFF

# Ray tracing scene: camera at the origin looking down -z
SPHERE_X = 0.0
SPHERE_Y = 0.0
SPHERE_Z = -5.0
SPHERE_RADIUS2 = 1.0
LIGHT_X = -0.57735027
LIGHT_Y = -0.57735027
LIGHT_Z = -0.57735027
BACKGROUND = (0.2, 0.2, 0.8)
SURFACE_TINT = (1.0, 0.7, 0.3)
AMBIENT = 0.2
DIFFUSE = 0.8
