import pytest

from deviceheaders.cli import main

def test_arm(tmp_path, packsDir, capsys):
    out = tmp_path / 'out'
    assert main(['-q', '-o', str(out), 'arm', 'SAMTEST18A', '--packs', str(packsDir)]) == 0
    assert (out / 'atsamtest18a.h').exists()
    assert (out / 'component' / 'tst_u9999.h').exists()
    assert (out / 'instances' / 'atsamtest18a.h').exists()
    assert (out / 'pio' / 'atsamtest18a.h').exists()
    assert 'ATSAMTEST18A:' in capsys.readouterr().out

def test_arm_style_and_device_db(tmp_path, packsDir, mipsYaml):
    out = tmp_path / 'out'
    (tmp_path / 'ATSAMTEST18A.yaml').write_text(mipsYaml.read_text().replace('PIC32MX795F512L', 'ATSAMTEST18A'))
    assert main(['-q', '-o', str(out), 'arm', 'SAMTEST18A', '--packs', str(packsDir),
                 '--style', 'microchip', '--device-db', str(tmp_path)]) == 0
    text = (out / 'atsamtest18a.h').read_text()
    assert 'pio/' not in text
    assert '__setDEVCFG1(f)' in text

def test_mips(tmp_path, mipsYaml):
    out = tmp_path / 'out'
    assert main(['-q', '-o', str(out), 'mips', str(mipsYaml)]) == 0
    assert (out / 'p32mx795f512l.h').exists()
    assert (out / '32MX795F512L' / 'p32MX795F512L.ld').exists()

@pytest.mark.parametrize('args,message', [
    (['arm', 'SAMNONE', '--packs', '{tmp}'], 'Cannot find ATDF file'),
    (['mips', '{tmp}/missing.yaml'], 'missing.yaml'),
    (['mips', '{tmp}/bad.yaml'], 'at (root)'),
    (['arm', 'SAMTEST18A', '--packs', '{tmp}', '--style-file', '{tmp}/bad.yaml'], 'at'),
])
def test_errors(tmp_path, packsDir, capsys, args, message):
    (tmp_path / 'bad.yaml').write_text('region: []\n')
    args = [a.replace('{tmp}', str(tmp_path)) for a in args]
    assert main(['-q', '-o', str(tmp_path / 'out')] + args) == 1
    err = capsys.readouterr().err
    assert err.startswith('Error: ')
    assert message in err

def test_unknown_style_rejected_by_parser(packsDir):
    with pytest.raises(SystemExit):
        main(['arm', 'SAMTEST18A', '--packs', str(packsDir), '--style', 'fancy'])
