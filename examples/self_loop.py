"""Example: self-loop geometry computed directly from the primitives."""

from linkgeom import Vector, calculate_loop
from linkgeom.vector import distance


def main() -> None:
    node = Vector(50.0, 50.0)
    for angle in (270.0, 0.0, 135.0):
        position, loop = calculate_loop(node, 16.0, 12.0, angle, is_clockwise=True)
        print(f"angle={angle:g}")
        print(f"  loop center: ({loop.center.x:.3f}, {loop.center.y:.3f})")
        for label, end in (("start", position.p1), ("end", position.p2)):
            print(
                f"  {label}: ({end.x:.3f}, {end.y:.3f}) "
                f"node-dist={distance(end, node):.3f} loop-dist={distance(end, loop.center):.3f}"
            )


if __name__ == "__main__":
    main()
