from datetime import date

import pytest

from deviceheaders.atdf import AtdfDoc

# A small device: one ordinary peripheral (TST), one core peripheral (NVIC) and one peripheral
# without instance register data (AES).
ATDF = """<?xml version="1.0" encoding="UTF-8"?>
<avr-tools-device-file schema-version="4.0">
  <devices>
    <device name="ATSAMTEST18A" architecture="CORTEX-M0PLUS" family="SAMD" series="SAMD21">
      <address-spaces>
        <address-space endianness="little" name="base" id="base" start="0x00000000" size="0x100000000">
          <memory-segment start="0x00000000" size="0x40000" type="flash" pagesize="64" name="FLASH"/>
          <memory-segment start="0x20000000" size="0x8000" type="ram" name="HSRAM"/>
        </address-space>
      </address-spaces>
      <parameters>
        <param name="__CM0PLUS_REV" value="1" caption="Cortex-M0+ processor revision"/>
        <param name="__NVIC_PRIO_BITS" value="2" caption="Number of NVIC priority bits"/>
      </parameters>
      <peripherals>
        <module name="TST" id="U9999" version="1.0.2">
          <instance name="TST">
            <register-group name="TST" name-in-module="TST" offset="0x42000800"/>
            <signals>
              <signal group="TX" index="0" function="C" pad="PA04"/>
              <signal group="EXT" function="default" pad="PA05"/>
              <signal group="RST" function="A" pad="RESET"/>
            </signals>
            <parameters>
              <param name="INSTANCE_ID" value="66"/>
              <param name="CHANNELS" value="3" caption="Number of channels"/>
            </parameters>
          </instance>
        </module>
        <module name="NVIC" id="U1234" version="1.0.0">
          <instance name="NVIC">
            <register-group name="NVIC" name-in-module="NVIC" offset="0xE000E100"/>
            <signals/>
            <parameters/>
          </instance>
        </module>
        <module name="AES" id="U2238" version="ZJ">
          <instance name="AES"/>
        </module>
      </peripherals>
      <interrupts>
        <interrupt index="-1" name="SysTick" caption="System Tick Timer"/>
        <interrupt index="0" name="PM" caption="Power Manager" module-instance="PM"/>
        <interrupt index="2" name="TST" caption="Test Peripheral" module-instance="TST"/>
        <interrupt index="5" name="EIC" caption="External Interrupt Controller" module-instance="EIC"/>
      </interrupts>
      <events>
        <generators>
          <generator name="TST_OVF" index="1" module-instance="TST"/>
        </generators>
        <users/>
      </events>
      <property-groups>
        <property-group name="SIGNATURES">
          <property name="DSU_DID" value="0x10010305"/>
        </property-group>
        <property-group name="ELECTRICAL_CHARACTERISTICS"/>
      </property-groups>
    </device>
  </devices>
  <modules>
    <module name="TST" id="U9999" version="1.0.2" caption="Test Peripheral">
      <register-group name="TST" caption="Test Peripheral" size="0xC">
        <register name="STATUS" offset="0x8" rw="R" size="4" caption="Status">
          <bitfield name="TX0" mask="0x1" caption="Transmit 0"/>
          <bitfield name="TX1" mask="0x2" caption="Transmit 1"/>
          <bitfield name="TX2" mask="0x4" caption="Transmit 2"/>
          <bitfield name="READY" mask="0x100" caption="Ready"/>
        </register>
        <register name="CTRL" offset="0x0" rw="RW" size="4" initval="0x00000000" caption="Control">
          <bitfield name="EN" mask="0x1" caption="Enable"/>
          <bitfield name="VAL" mask="0xF0" caption="Value" values="TST_CTRL__VAL"/>
        </register>
      </register-group>
      <value-group name="TST_CTRL__VAL">
        <value name="LOW" value="0x0" caption="Low level"/>
        <value name="HIGH" value="0xF" caption="High level"/>
      </value-group>
    </module>
    <module name="NVIC" id="U1234" version="1.0.0" caption="Nested Vectored Interrupt Controller">
      <register-group name="NVIC" size="0x4">
        <register name="ISER" offset="0x0" rw="RW" size="4" caption="Interrupt Set Enable"/>
      </register-group>
    </module>
    <module name="AES" id="U2238" version="ZJ" caption="Advanced Encryption Standard">
      <register-group name="AES" size="0x4">
        <register name="CTRLA" offset="0x0" rw="RW" size="4" caption="Control A"/>
      </register-group>
    </module>
  </modules>
</avr-tools-device-file>
"""

MIPS_YAML = """name: PIC32MX795F512L
arch: mips32r2
features:
  mips32: true
  mips16: true
regions:
  - {name: boot, type: BOOT, begin: 0x1FC00000, end: 0x1FC02FF0}
  - {name: code, type: CODE, begin: 0x1D000000, end: 0x1D080000}
  - {name: kseg1_data_mem, type: SRAM, begin: 0x00000000, end: 0x00020000}
  - {name: sfrs, type: PERIPHERAL, begin: 0x1F800000, end: 0x1F900000}
  - {name: configsfrs, type: FUSE, begin: 0x1FC02FF0, end: 0x1FC03000}
  - {name: emulator, type: UNSPECIFIED, begin: 0x1FC03000, end: 0x1FC04000}
interrupts:
  defaultBase: 0x9D000000
  shadowSets: 2
  vectors:
    - {number: 0, name: CORE_TIMER, caption: Core Timer}
    - {number: 3, name: TIMER_1}
  requests:
    - {number: 0, name: CORE_TIMER}
    - {number: 4, name: TIMER_1}
sfrs:
  - name: WDTCON
    address: 0x1F800000
    portals: [CLR, SET, INV]
    baseOf: [WDT]
    modes:
      - fields:
          - {name: WDTCLR, position: 0, width: 1}
          - {name: SWDTPS, position: 2, width: 5}
          - {name: ON, position: 15, width: 1}
      - name: W
        fields:
          - {name: w, position: 0, width: 32}
dcrs:
  - name: DEVCFG1
    address: 0x1FC02FF8
    default: 0xFFFFFFFF
    impl: 0x03FFFFFF
    fields:
      - name: FNOSC
        position: 0
        width: 3
        desc: Oscillator Selection Bits
        options:
          - {name: FRC, value: 0, desc: Fast RC Osc}
          - {name: PRIPLL, value: 3, desc: Primary Osc w/PLL}
"""

TODAY = date(2024, 3, 1)

@pytest.fixture
def atdfText():
    return ATDF

@pytest.fixture
def atdfDoc():
    return AtdfDoc.fromString(ATDF)

@pytest.fixture
def packsDir(tmp_path):
    """ a packs tree holding the test device under its ATSAM name """
    d = tmp_path / 'packs' / 'SAMTEST_DFP' / 'atdf'
    d.mkdir(parents=True)
    (d / 'ATSAMTEST18A.atdf').write_text(ATDF, encoding='utf-8')
    return tmp_path / 'packs'

@pytest.fixture
def mipsYaml(tmp_path):
    path = tmp_path / 'PIC32MX795F512L.yaml'
    path.write_text(MIPS_YAML, encoding='utf-8')
    return path

@pytest.fixture
def today():
    return TODAY
