from flask_bcrypt import check_password_hash


def test_hash_password_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['hash-password', 'hunter2'])
    assert result.exit_code == 0
    hashed = result.output.strip()
    assert check_password_hash(hashed, 'hunter2')
    assert not check_password_hash(hashed, 'hunter3')


def test_sweep_command(flask_app, registry, clock):
    registry.create_game()
    clock.advance(400)
    live = registry.create_game()
    clock.advance(300)

    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['sweep'])
    assert result.exit_code == 0
    assert 'Removed 1 expired games.' in result.output
    assert len(registry) == 1
    assert live in registry
