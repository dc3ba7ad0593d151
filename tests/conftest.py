# tests/conftest.py
"""
Shared Java sources and repository fixtures.
"""

import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest


SHAPE_JAVA = textwrap.dedent("""\
    package edu.example.shapes;

    import java.util.List;
    import java.util.ArrayList;
    import static java.lang.Math.max;

    /**
     * A shape.
     */
    public class Shape implements Comparable<Shape> {
        private static final int LIMIT = 10;
        private int width, height;
        protected String name;

        /** Builds a shape. */
        public Shape(int width, int height) {
            this.width = width;
            this.height = height;
        }

        public int area() {
            int total = 0;
            for (int i = 0; i < width; i++) {
                total += height;
            }
            return total;
        }

        public static Shape largest(List<Shape> shapes) {
            Shape best = null;
            for (Shape s : shapes) {
                if (best == null || s.area() > best.area()) {
                    best = s;
                }
            }
            return best;
        }

        @Override
        public int compareTo(Shape other) {
            return Integer.compare(area(), other.area());
        }

        interface Visitor {
            int SIDES = 4;
            void visit(Shape shape);
        }

        enum Kind { SQUARE, CIRCLE }
    }
""")


WORKER_JAVA = textwrap.dedent("""\
    class Worker {
        void run(List<String> items) {
            try (Reader r = open()) {
                while (ready()) {
                    process();
                }
            } catch (IOException | RuntimeException e) {
                log(e);
            } finally {
                close();
            }
            do {
                step();
            } while (busy());
            items.forEach(item -> System.out.println(item));
            items.sort((a, b) -> a.compareTo(b));
            Runnable task = new Runnable() {
                @Override
                public void run() {
                    helper();
                }
            };
            switch (items.size()) {
                case 0:
                    break;
                default:
                    try {
                        step();
                    } catch (Exception ignored) {
                    }
            }
        }
    }
""")


UTIL_JAVA = textwrap.dedent("""\
    import static java.util.Collections.sort;
    import java.util.List;

    class Util {
        static int counter;
        int size;

        static int twice(int x) { return x * 2; }

        int self() { return size; }

        void use(List<String> names) {
            int a = twice(3);
            int b = self();
            int c = Math.max(a, b);
            sort(names);
            System.out.println(Util.counter);
            int d = this.size + names.size();
            String t = String.valueOf(d).trim();
            Util.twice(c);
            helper();
        }
    }
""")


MAIN_FXML = textwrap.dedent("""\
    <?xml version="1.0" encoding="UTF-8"?>
    <VBox xmlns:fx="http://javafx.com/fxml"/>
""")


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: text}`` under a fresh directory and return it."""

    def _make(files: Dict[str, str]) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for rel, text in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root

    return _make


@pytest.fixture(scope="session")
def shape_java() -> str:
    return SHAPE_JAVA


@pytest.fixture(scope="session")
def worker_java() -> str:
    return WORKER_JAVA


@pytest.fixture(scope="session")
def util_java() -> str:
    return UTIL_JAVA


@pytest.fixture(scope="session")
def main_fxml() -> str:
    return MAIN_FXML
