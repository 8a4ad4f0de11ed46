import asyncio
from typing import Optional

import httpx
import streamlit as st

from backend.utils.documento_utils import DocumentoUtils
from frontend.services.cliente_store import ClienteState, ClienteStore

st.set_page_config(page_title="Cadastro de Clientes", page_icon="🗂️", layout="wide")

# -------------- Helpers --------------
FORM_KEYS = {"nome": "f_nome", "documento": "f_documento", "telefone": "f_telefone", "bloqueado": "f_bloqueado"}
PAGE_SIZE = 10


def current_state() -> ClienteState:
    """O estado sobrevive aos reruns do Streamlit; o httpx.AsyncClient não."""
    if "cliente_state" not in st.session_state:
        st.session_state["cliente_state"] = ClienteState()
    return st.session_state["cliente_state"]


def go_to(view: Optional[str] = None, cliente_id: Optional[str] = None) -> None:
    # Rotas: sem view -> lista ("/"); view=cadastro[&id=...] -> formulário ("/cadastro/:id?")
    st.query_params.clear()
    if view:
        st.query_params["view"] = view
    if cliente_id:
        st.query_params["id"] = cliente_id
    st.session_state.pop("form_loaded_for", None)
    st.rerun()


def current_page() -> int:
    try:
        return max(1, int(st.query_params.get("page", 1)))
    except ValueError:
        return 1


def go_to_page(page: int) -> None:
    st.query_params["page"] = str(page)
    st.rerun()


def show_flash() -> None:
    # Mensagens gravadas antes de um st.rerun() aparecem na próxima execução
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)


def mask_documento_input() -> None:
    # Máscara aplicada a cada alteração do campo
    key = FORM_KEYS["documento"]
    st.session_state[key] = DocumentoUtils.mask_documento(st.session_state.get(key, ""))


def fill_form_widgets(store: ClienteStore) -> None:
    form = store.state.form
    st.session_state[FORM_KEYS["nome"]] = form.nome
    st.session_state[FORM_KEYS["documento"]] = DocumentoUtils.mask_documento(form.documento)
    st.session_state[FORM_KEYS["telefone"]] = form.telefone
    st.session_state[FORM_KEYS["bloqueado"]] = form.bloqueado


# -------------- Views --------------
async def render_list(store: ClienteStore) -> None:
    st.subheader("Clientes")
    if st.button("Novo cliente", type="primary"):
        go_to("cadastro")

    show_flash()
    await store.fetch_clientes(page=current_page(), limit=PAGE_SIZE)
    if store.state.error:
        st.error(store.state.error)
        return
    state = store.state
    if state.total_pages and state.current_page > state.total_pages:
        # Página deixou de existir (ex.: exclusão do último item)
        go_to_page(state.total_pages)
    if not state.clientes:
        st.info("Nenhum cliente cadastrado ainda.")

    for c in store.state.clientes:
        status_label = "🔒 Bloqueado" if c.bloqueado else "✅ Ativo"
        with st.expander(f"{c.nome} • {DocumentoUtils.mask_documento(c.documento)} • {status_label}"):
            st.write(f"Telefone: {c.telefone or '-'}")
            col_edit, col_block, col_del = st.columns(3)
            with col_edit:
                if st.button("Editar", key=f"edit_{c.id}"):
                    go_to("cadastro", c.id)
            with col_block:
                if st.button("Desbloquear" if c.bloqueado else "Bloquear", key=f"block_{c.id}"):
                    await store.toggle_block_status(c.id)
                    if store.state.error:
                        st.error(store.state.error)
                    else:
                        st.rerun()
            with col_del:
                if st.button("Excluir", key=f"del_{c.id}"):
                    if await store.delete_cliente(c.id):
                        st.session_state["flash"] = f"Cliente {c.nome} removido"
                        st.rerun()
                    st.error(store.state.error)

    if state.total_pages > 1:
        pages = list(range(1, state.total_pages + 1))
        chosen = st.selectbox(
            f"Página (total de {state.total_items} clientes)", pages,
            index=pages.index(state.current_page) if state.current_page in pages else 0,
        )
        if chosen != state.current_page:
            go_to_page(chosen)


async def render_form(store: ClienteStore, cliente_id: Optional[str]) -> None:
    # Carrega o formulário uma única vez por rota
    route_key = cliente_id or "novo"
    if st.session_state.get("form_loaded_for") != route_key:
        if cliente_id:
            if not await store.start_edit(cliente_id):
                st.error(store.state.error)
                if st.button("Voltar"):
                    go_to()
                return
        else:
            store.reset_form()
        fill_form_widgets(store)
        st.session_state["form_loaded_for"] = route_key

    st.subheader("Editar cliente" if store.state.is_editing else "Novo cliente")
    nome = st.text_input("Nome/Razão Social", key=FORM_KEYS["nome"])
    documento = st.text_input("CPF/CNPJ", key=FORM_KEYS["documento"], on_change=mask_documento_input, max_chars=18)
    tipo = DocumentoUtils.tipo_documento(documento)
    if documento and tipo and not DocumentoUtils.is_documento_valido(documento):
        st.warning(f"{tipo} com dígitos verificadores inválidos.")
    elif tipo:
        st.caption(f"Documento detectado: {tipo}")
    telefone = st.text_input("Telefone", key=FORM_KEYS["telefone"])
    bloqueado = st.checkbox("Bloqueado", key=FORM_KEYS["bloqueado"])

    col_save, col_back = st.columns([1, 3])
    with col_save:
        if st.button("Salvar", type="primary"):
            if not nome or nome.strip() == "":
                st.warning("Nome é obrigatório e não pode estar em branco.")
                return
            store.state.form.nome = nome
            store.state.form.documento = documento
            store.state.form.telefone = telefone
            store.state.form.bloqueado = bloqueado
            if await store.save_cliente():
                st.session_state["flash"] = "Cadastro salvo."
                go_to()
            else:
                st.error(store.state.error)
    with col_back:
        if st.button("Cancelar"):
            store.reset_form()
            go_to()


async def main_ui():
    st.title("🗂️ Cadastro de Clientes")
    st.caption("Interface em Streamlit para a API de clientes")

    async with httpx.AsyncClient() as client:
        store = ClienteStore(client, state=current_state())
        if st.query_params.get("view") == "cadastro":
            await render_form(store, st.query_params.get("id"))
        else:
            await render_list(store)

asyncio.run(main_ui())
