"""
Workspace Scaffolding
=====================

Creates the files of a multi-target Cargo workspace:

    <name>/
        Cargo.toml            workspace manifest
        core-lib/             hardware-agnostic no_std library
        tests/                host tests using embedded-hal-mock
        .cargo/config.toml
        glue.toml             empty glue model
        README.md

and, per platform, a ``hal-<platform>`` wrapper crate and an
``app-<platform>`` binary crate. Scaffolding only writes files; it never
touches capability analysis or toolchain selection.
"""

import logging
import re
from pathlib import Path
from string import Template
from typing import List, Optional, Sequence

from multitarget.core.glue import GLUE_FILENAME, save_glue
from multitarget.core.toolchain import is_desktop_target
from multitarget.models.glue import GlueModel

logger = logging.getLogger(__name__)

DEFAULT_HAL_CRATE = "stm32f4xx-hal"

WORKSPACE_CARGO = """\
[workspace]
resolver = "2"
members = [
    "core-lib",
    "tests",
]

[workspace.package]
edition = "2021"
authors = ["Your Name <you@example.com>"]
license = "MIT OR Apache-2.0"

[workspace.dependencies]
embedded-hal = "1.0"
embedded-hal-mock = "0.11"
defmt = "0.3"
"""

CORE_LIB_CARGO = """\
[package]
name = "core-lib"
version = "0.1.0"
edition.workspace = true
authors.workspace = true
license.workspace = true

[dependencies]
embedded-hal = { workspace = true }

[features]
default = []
std = []
"""

CORE_LIB_SOURCE = """\
#![cfg_attr(not(feature = "std"), no_std)]

use embedded_hal::i2c::I2c;

/// Example temperature sensor driver (hardware-agnostic)
pub struct TemperatureSensor<I2C> {
    i2c: I2C,
    address: u8,
}

impl<I2C> TemperatureSensor<I2C>
where
    I2C: I2c,
{
    pub fn new(i2c: I2C, address: u8) -> Self {
        Self { i2c, address }
    }

    pub fn read_temperature(&mut self) -> Result<i16, I2C::Error> {
        let mut buffer = [0u8; 2];
        self.i2c.write_read(self.address, &[0x00], &mut buffer)?;
        Ok(i16::from_be_bytes(buffer))
    }
}

/// Example LED controller (hardware-agnostic)
pub trait LedController {
    fn turn_on(&mut self);
    fn turn_off(&mut self);
    fn toggle(&mut self);
}

/// Application logic that uses abstractions
pub struct Application<L: LedController> {
    pub led: L,
    counter: u32,
}

impl<L: LedController> Application<L> {
    pub fn new(led: L) -> Self {
        Self { led, counter: 0 }
    }

    pub fn tick(&mut self) {
        self.counter += 1;
        if self.counter % 1000 == 0 {
            self.led.toggle();
        }
    }
}
"""

TESTS_CARGO = """\
[package]
name = "tests"
version = "0.1.0"
edition.workspace = true
authors.workspace = true
license.workspace = true

[dependencies]
core-lib = { path = "../core-lib", features = ["std"] }
embedded-hal-mock = { workspace = true }

[[test]]
name = "integration"
path = "integration_test.rs"
"""

TESTS_SOURCE = """\
use core_lib::{Application, LedController, TemperatureSensor};
use embedded_hal_mock::eh1::i2c::{Mock as I2cMock, Transaction};

struct MockLed {
    state: bool,
}

impl LedController for MockLed {
    fn turn_on(&mut self) {
        self.state = true;
    }

    fn turn_off(&mut self) {
        self.state = false;
    }

    fn toggle(&mut self) {
        self.state = !self.state;
    }
}

#[test]
fn temperature_sensor_reads_big_endian() {
    let expectations = vec![Transaction::write_read(0x48, vec![0x00], vec![0x12, 0x34])];

    let mut i2c = I2cMock::new(&expectations);
    let mut sensor = TemperatureSensor::new(i2c.clone(), 0x48);

    assert_eq!(sensor.read_temperature().unwrap(), 0x1234);
    i2c.done();
}

#[test]
fn application_toggles_led_every_thousand_ticks() {
    let mut app = Application::new(MockLed { state: false });

    for _ in 0..999 {
        app.tick();
    }
    assert!(!app.led.state);

    app.tick();
    assert!(app.led.state);
}
"""

CARGO_CONFIG = """\
[build]
target-dir = "target"

[profile.release]
opt-level = "z"
lto = true
codegen-units = 1
debug = false

[profile.release-debug]
inherits = "release"
debug = true
"""

README = Template("""\
# $name

Multi-target Rust embedded project.

## Quick Start

```bash
# Run unit tests on host
multitarget test

# Add a platform
multitarget platform add stm32 --target thumbv7em-none-eabi

# Analyze its HAL crate for host-testable traits
multitarget glue init stm32 https://github.com/stm32-rs/stm32f4xx-hal

# Build for platform
multitarget build --target stm32
```

## Project Structure

- `core-lib/` - Hardware-agnostic business logic
- `tests/` - Host-based unit tests
- `app-*/` - Platform-specific binaries
- `hal-*/` - HAL wrapper crates
- `glue.toml` - Platforms, HAL capabilities and toolchain choices
""")

HAL_CARGO = Template("""\
[package]
name = "hal-$platform"
version = "0.1.0"
edition.workspace = true
authors.workspace = true
license.workspace = true

[dependencies]
core-lib = { path = "../core-lib" }
embedded-hal = { workspace = true }
$hal_crate = "*"  # Add specific version as needed
""")

HAL_SOURCE = Template("""\
#![no_std]

use core_lib::LedController;
use embedded_hal::digital::OutputPin;

/// Platform-specific LED implementation
pub struct ${type_prefix}Led<P: OutputPin> {
    pin: P,
}

impl<P: OutputPin> ${type_prefix}Led<P> {
    pub fn new(pin: P) -> Self {
        Self { pin }
    }
}

impl<P: OutputPin> LedController for ${type_prefix}Led<P> {
    fn turn_on(&mut self) {
        let _ = self.pin.set_high();
    }

    fn turn_off(&mut self) {
        let _ = self.pin.set_low();
    }

    fn toggle(&mut self) {
        // Platform-specific toggle if available
        let _ = self.pin.set_low();
    }
}
""")

APP_CARGO = Template("""\
[package]
name = "app-$platform"
version = "0.1.0"
edition.workspace = true
authors.workspace = true
license.workspace = true

[dependencies]
core-lib = { path = "../core-lib" }
hal-$platform = { path = "../hal-$platform" }
embedded-hal = { workspace = true }
$runtime_dependencies
[[bin]]
name = "$platform"
path = "src/main.rs"
""")

EMBEDDED_RUNTIME_DEPENDENCIES = 'panic-halt = "0.2"\ncortex-m-rt = "0.7"\n'

MEMORY_X = """\
MEMORY
{
  FLASH : ORIGIN = 0x08000000, LENGTH = 256K
  RAM : ORIGIN = 0x20000000, LENGTH = 64K
}
"""

EMBEDDED_MAIN = Template("""\
#![no_std]
#![no_main]

use panic_halt as _;
use cortex_m_rt::entry;

#[entry]
fn main() -> ! {
    // Initialize hardware
    // let peripherals = init_hardware();

    // Create application
    // let led = ${hal_module}::${type_prefix}Led::new(peripherals.led_pin);
    // let mut app = core_lib::Application::new(led);

    loop {
        // app.tick();
    }
}
""")

DESKTOP_MAIN = Template("""\
fn main() {
    println!("Running $platform application");

    // Initialize platform-specific components
    // let led = ${hal_module}::${type_prefix}Led::new(...);
    // let mut app = core_lib::Application::new(led);

    // Run application
    // loop {
    //     app.tick();
    // }
}
""")


def _type_prefix(platform: str) -> str:
    return re.sub(r"[^0-9A-Za-z_]", "_", platform).upper()


def _write(path: Path, content: str, created: List[Path]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    created.append(path)
    logger.debug(f"Wrote {path}")


def create_workspace(parent: Path, name: str) -> List[Path]:
    """
    Create a new workspace directory ``parent/name``.

    Args:
        parent: Directory to create the workspace in
        name: Workspace (and directory) name

    Returns:
        Paths of the files written, in creation order

    Raises:
        FileExistsError: If the directory already holds a glue.toml
    """
    root = Path(parent) / name
    if (root / GLUE_FILENAME).exists():
        raise FileExistsError(f"{root / GLUE_FILENAME} already exists")

    root.mkdir(parents=True, exist_ok=True)
    created: List[Path] = []

    _write(root / "Cargo.toml", WORKSPACE_CARGO, created)
    _write(root / "core-lib" / "Cargo.toml", CORE_LIB_CARGO, created)
    _write(root / "core-lib" / "src" / "lib.rs", CORE_LIB_SOURCE, created)
    _write(root / "tests" / "Cargo.toml", TESTS_CARGO, created)
    _write(root / "tests" / "integration_test.rs", TESTS_SOURCE, created)
    _write(root / ".cargo" / "config.toml", CARGO_CONFIG, created)
    created.append(save_glue(GlueModel(), root / GLUE_FILENAME))
    _write(root / "README.md", README.substitute(name=name), created)

    logger.info(f"Created workspace '{name}' at {root}")
    return created


def create_platform_crates(
    root: Path,
    platform: str,
    target: str,
    hal_crate: Optional[str] = None,
) -> List[Path]:
    """
    Write the ``hal-<platform>`` and ``app-<platform>`` crates.

    Embedded targets get a ``no_std``/``no_main`` entry point, a memory.x
    linker script and the panic-halt and cortex-m-rt runtime crates;
    desktop targets get an ordinary ``main``.
    """
    root = Path(root)
    created: List[Path] = []
    embedded = not is_desktop_target(target)
    values = {
        "platform": platform,
        "hal_crate": hal_crate or DEFAULT_HAL_CRATE,
        "hal_module": f"hal_{platform}".replace("-", "_"),
        "type_prefix": _type_prefix(platform),
        "runtime_dependencies": EMBEDDED_RUNTIME_DEPENDENCIES if embedded else "",
    }

    hal_dir = root / f"hal-{platform}"
    _write(hal_dir / "Cargo.toml", HAL_CARGO.substitute(values), created)
    _write(hal_dir / "src" / "lib.rs", HAL_SOURCE.substitute(values), created)

    app_dir = root / f"app-{platform}"
    _write(app_dir / "Cargo.toml", APP_CARGO.substitute(values), created)
    if embedded:
        _write(app_dir / "memory.x", MEMORY_X, created)
        _write(app_dir / "src" / "main.rs", EMBEDDED_MAIN.substitute(values), created)
    else:
        _write(app_dir / "src" / "main.rs", DESKTOP_MAIN.substitute(values), created)

    return created


def add_workspace_members(root: Path, members: Sequence[str]) -> List[str]:
    """
    Insert crate names into the workspace ``members`` array.

    Names already listed are skipped. Returns the names actually added.

    Raises:
        FileNotFoundError: If the workspace Cargo.toml is missing
        ValueError: If it has no ``members = [`` array
    """
    cargo_path = Path(root) / "Cargo.toml"
    content = cargo_path.read_text(encoding="utf-8")

    marker = re.search(r"members\s*=\s*\[", content)
    if marker is None:
        raise ValueError(f"{cargo_path} has no workspace members array")

    added = [m for m in members if f'"{m}"' not in content]
    if not added:
        return []

    insertion = "".join(f'\n    "{m}",' for m in added)
    updated = content[: marker.end()] + insertion + content[marker.end() :]
    cargo_path.write_text(updated, encoding="utf-8")
    logger.debug(f"Added workspace members: {', '.join(added)}")
    return added
