"""Shared fixtures: a small interview guide laid out like a Jekyll site."""

from __future__ import annotations

from pathlib import Path

import pytest

KOTLIN = """---
layout: default
title: Kotlin Basics
nav_order: 1
---

# Kotlin Basics

## Overview

Kotlin is the preferred language for Android.

## Interview Questions & Answers

### Q1: What is a data class?

A class that derives `equals`, `hashCode` and `toString` from its properties.

### Q2: What is `lateinit`?

Deferred initialization of a non-null property.

```kotlin
# not a heading
lateinit var name: String
```

---

[Next: Coroutines & Flows →](02-coroutines.md)
"""

COROUTINES = """---
layout: default
title: Coroutines & Flows
nav_order: 2
---

# Coroutines & Flows

## Interview Questions & Answers

### Q1. What is a suspend function?

A function that can pause without blocking a thread.

#### Follow-up

Answer details stay with the question above.

### Q2. What is a Flow?

A cold asynchronous stream.

### Q3. StateFlow vs SharedFlow?

StateFlow always holds a value.

---

[← Previous: Kotlin Basics](01-kotlin.md) | [Next: Jetpack Compose →](03-compose.md)
"""

COMPOSE = """# Jetpack Compose

## Interview Questions

### 1. What is recomposition?

Re-running composables whose inputs changed.

[← Previous](02-coroutines.md)
"""

SITE_CONFIG = """title: Android Interview Guide
exclude:
  - SETUP.md
"""


@pytest.fixture
def guide_dir(tmp_path: Path) -> Path:
    """A three-page guide with consistent navigation."""
    root = tmp_path / "guide"
    root.mkdir()
    (root / "01-kotlin.md").write_text(KOTLIN, encoding="utf-8")
    (root / "02-coroutines.md").write_text(COROUTINES, encoding="utf-8")
    (root / "03-compose.md").write_text(COMPOSE, encoding="utf-8")
    (root / "SETUP.md").write_text("# Setup\n\nbundle exec jekyll serve\n", encoding="utf-8")
    (root / "_config.yml").write_text(SITE_CONFIG, encoding="utf-8")
    return root
