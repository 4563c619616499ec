"""
Testes para os endpoints /api/v1/etiquetas
"""
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from app.main import app
from app.models.etiqueta import Etiqueta
from app.services.etiqueta_service import build_panel
from app.services.record_store import StoreError

client = TestClient(app)

CARIMBADEIRA = "C01"
COMPONENTE = "Aba"


@pytest.fixture(scope="function")
def panel(db_session):
    """Painel novo sobre o banco de testes"""
    app.state.panel = build_panel()
    yield app.state.panel
    del app.state.panel


def _form(**overrides):
    form = {
        "op": "123456",
        "carimbadeira": CARIMBADEIRA,
        "componente": COMPONENTE,
        "quantidade_etiqueta": "100",
        "quantidade_maquina": "95",
    }
    form.update(overrides)
    return form


def test_create_etiqueta_201(panel, db_session):
    """Testa registro com sucesso (201)"""
    response = client.post("/api/v1/etiquetas", json=_form())

    assert response.status_code == 201
    data = response.json()
    assert data["mensagem"] == "Registro adicionado com sucesso."
    assert data["registro"]["op"] == "123.456"
    assert data["registro"]["percentual_erro"] == pytest.approx(-5.0)
    assert data["resumo"]["total_registros"] == 1
    assert data["resumo"]["desatualizado"] is False

    etiqueta = db_session.query(Etiqueta).first()
    assert etiqueta is not None
    assert etiqueta.quantidade_maquina == 95


def test_create_etiqueta_ignores_client_percentual(panel):
    """Testa que o percentual enviado pelo cliente é ignorado"""
    response = client.post("/api/v1/etiquetas", json={**_form(), "percentual_erro": 99.0})

    assert response.status_code == 201
    assert response.json()["registro"]["percentual_erro"] == pytest.approx(-5.0)


def test_create_etiqueta_numeric_quantities(panel):
    response = client.post("/api/v1/etiquetas", json=_form(quantidade_etiqueta=200, quantidade_maquina=200))
    assert response.status_code == 201
    assert response.json()["registro"]["percentual_erro"] == 0.0


def test_create_etiqueta_validation_422(panel, db_session):
    """Testa erro de validação: formulário devolvido e nada gravado"""
    form = _form(quantidade_etiqueta="0", quantidade_maquina="abc")
    response = client.post("/api/v1/etiquetas", json=form)

    assert response.status_code == 422
    data = response.json()
    assert "quantidade_etiqueta" in data["erros"]
    assert "quantidade_maquina" in data["erros"]
    assert data["formulario"]["quantidade_maquina"] == "abc"
    assert db_session.query(Etiqueta).count() == 0


def test_create_etiqueta_unknown_carimbadeira_422(panel):
    response = client.post("/api/v1/etiquetas", json=_form(carimbadeira="NAO-EXISTE"))
    assert response.status_code == 422
    assert "carimbadeira" in response.json()["erros"]


def test_create_etiqueta_store_error_503(panel):
    """Testa erro do armazenamento: notificação e formulário preservado"""
    with patch.object(panel.store, "insert", side_effect=StoreError("connection refused")):
        response = client.post("/api/v1/etiquetas", json=_form())

    assert response.status_code == 503
    data = response.json()
    assert data["mensagem"] == "Não foi possível salvar o registro."
    assert data["formulario"]["op"] == "123456"


def test_create_etiqueta_in_flight_409(panel):
    """Testa bloqueio de gravação duplicada em andamento"""
    panel._submit_lock.acquire()
    try:
        response = client.post("/api/v1/etiquetas", json=_form())
    finally:
        panel._submit_lock.release()

    assert response.status_code == 409


def test_end_to_end_list_and_summary(panel):
    """Testa dois registros: lista do mais recente e média geral 2.5"""
    client.post("/api/v1/etiquetas", json=_form(op="111", quantidade_maquina="95"))
    client.post("/api/v1/etiquetas", json=_form(op="222", carimbadeira="C02", componente="Válvula", quantidade_maquina="110"))

    response = client.get("/api/v1/etiquetas")
    assert response.status_code == 200
    registros = response.json()
    assert [r["op"] for r in registros] == ["222", "111"]
    assert registros[0]["percentual_erro"] == pytest.approx(10.0)
    assert registros[1]["percentual_erro"] == pytest.approx(-5.0)

    response = client.get("/api/v1/etiquetas/resumo")
    assert response.status_code == 200
    resumo = response.json()
    assert resumo["media_geral"] == pytest.approx(2.5)
    assert list(resumo["media_por_carimbadeira"].keys()) == ["C01", "C02", "C03", "C04", "C05"]
    assert resumo["media_por_carimbadeira"]["C01"] == pytest.approx(-5.0)
    assert resumo["media_por_carimbadeira"]["C03"] == 0.0
    assert list(resumo["media_por_componente"].keys()) == ["Aba", "Válvula", "Fundo", "Tampa"]
    assert resumo["media_por_componente"]["Válvula"] == pytest.approx(10.0)


def test_painel(panel):
    client.post("/api/v1/etiquetas", json=_form())

    response = client.get("/api/v1/etiquetas/painel")
    assert response.status_code == 200
    data = response.json()
    assert len(data["registros"]) == 1
    assert data["resumo"]["total_registros"] == 1


def test_list_etiquetas_store_error_503(panel):
    with patch.object(panel.store, "list_all", side_effect=StoreError("connection refused")):
        response = client.get("/api/v1/etiquetas")

    assert response.status_code == 503
    assert response.json()["detail"] == "Não foi possível carregar os registros."


def test_resumo_empty(panel):
    response = client.get("/api/v1/etiquetas/resumo")
    assert response.status_code == 200
    assert response.json()["media_geral"] == 0.0
    assert response.json()["total_registros"] == 0


@pytest.mark.parametrize("valor,esperado", [
    ("12", "12"),
    ("1234", "123.4"),
    ("123.456/7", "123.456/7"),
    ("1234567890", "123.456/78.90"),
])
def test_formatar_op(panel, valor, esperado):
    response = client.get("/api/v1/etiquetas/formatar-op", params={"valor": valor})
    assert response.status_code == 200
    assert response.json()["op"] == esperado


def test_configuracao(panel):
    response = client.get("/api/v1/configuracao")
    assert response.status_code == 200
    data = response.json()
    assert data["carimbadeiras"][0] == "C01"
    assert "Válvula" in data["componentes"]
    assert data["op_format"] == "separado"


def test_health():
    assert client.get("/health").json() == {"status": "healthy"}


def test_health_db(db_session):
    response = client.get("/health/db")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.parametrize("overrides,campo", [
    ({"quantidade_maquina": "1" * 5000}, "quantidade_maquina"),
    ({"quantidade_etiqueta": "1", "quantidade_maquina": "1" + "0" * 400}, "quantidade_maquina"),
    ({"quantidade_maquina": str(10 ** 20)}, "quantidade_maquina"),
    ({"quantidade_etiqueta": 10 ** 20}, "quantidade_etiqueta"),
])
def test_create_etiqueta_large_quantity_422(panel, db_session, overrides, campo):
    """Testa que quantidades enormes são erro de validação, não erro interno"""
    response = client.post("/api/v1/etiquetas", json=_form(**overrides))

    assert response.status_code == 422
    data = response.json()
    assert campo in data["erros"]
    assert "formulario" in data
    assert db_session.query(Etiqueta).count() == 0


def test_create_etiqueta_numeric_op(panel):
    """Testa OP enviada como número JSON"""
    response = client.post("/api/v1/etiquetas", json=_form(op=123456))

    assert response.status_code == 201
    assert response.json()["registro"]["op"] == "123.456"


def test_create_etiqueta_fractional_quantity_422(panel):
    response = client.post("/api/v1/etiquetas", json=_form(quantidade_etiqueta=10.5))

    assert response.status_code == 422
    data = response.json()
    assert "quantidade_etiqueta" in data["erros"]
    assert data["formulario"]["quantidade_etiqueta"] == 10.5


def test_create_etiqueta_unparseable_body_keeps_form_shape(panel):
    """Testa que erro de leitura do corpo devolve mensagem, erros e formulário"""
    form = _form(quantidade_etiqueta=[100])
    response = client.post("/api/v1/etiquetas", json=form)

    assert response.status_code == 422
    data = response.json()
    assert data["mensagem"] == "Verifique os campos do formulário."
    assert "quantidade_etiqueta" in data["erros"]
    assert data["formulario"]["op"] == "123456"
    assert "detail" not in data
