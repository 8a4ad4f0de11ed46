from streamlit.testing.v1 import AppTest

# Sem API no ar: a listagem mostra o erro de conexão, mas a página precisa renderizar


def test_list_view_shows_flash_message_once():
    at = AppTest.from_file("../app.py", default_timeout=30)
    at.session_state["flash"] = "Cadastro salvo."
    at.run()
    assert not at.exception
    assert [s.value for s in at.success] == ["Cadastro salvo."]
    assert "flash" not in at.session_state

    at.run()
    assert [s.value for s in at.success] == []


def test_list_view_reports_unreachable_api():
    at = AppTest.from_file("../app.py", default_timeout=30)
    at.run()
    assert not at.exception
    assert any(e.value.startswith("Erro ao buscar clientes:") for e in at.error)
