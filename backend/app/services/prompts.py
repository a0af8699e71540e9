"""Prompt templates for the CloudCoffee assistant (pt-BR audience)."""

ANALYZE_IMAGE_PROMPT = """Analise esta imagem de uma câmera de segurança de uma cafeteria.
Tarefa: {task}

Retorne um JSON com a seguinte estrutura:
{{
  "objects": [
    {{
      "label": "string (ex: Pessoa, Pão de Queijo, Fila)",
      "box_2d": [ymin, xmin, ymax, xmax],
      "info": "string (detalhe adicional)"
    }}
  ],
  "summary": "Resumo narrativo do que está acontecendo para o gerente",
  "charts": [
    {{
      "type": "bar ou pie",
      "title": "Título descritivo do gráfico",
      "data": [{{"name": "Categoria", "value": 10}}]
    }}
  ]
}}

As coordenadas de box_2d são normalizadas de 0 a 1000.
Gere gráficos relevantes baseados na análise. Exemplos:
- Contagem de objetos por categoria (bar chart)
- Nível de estoque por item (bar chart)
- Distribuição de pessoas por área (pie chart)

Seja preciso nas coordenadas dos bounding boxes."""

STORE_INSIGHTS_PROMPT = """Você é o assistente de IA corporativo de uma cafeteria chamada "CloudCoffee".
Contexto atual da loja: {context}
Pergunta do gestor: {query}

Responda de forma profissional e baseada em dados, cruzando informações de vendas, clima e visão computacional se necessário.

Retorne um JSON com a seguinte estrutura:
{{
  "text": "Sua resposta completa em Markdown",
  "charts": [
    {{
      "type": "bar ou line ou pie ou area",
      "title": "Título do gráfico",
      "data": [{{"name": "X", "value": 10}}]
    }}
  ]
}}

Inclua gráficos APENAS quando a pergunta for quantitativa ou envolver dados numéricos (vendas, estoque, fluxo, comparações).
Para perguntas simples ou conversacionais, retorne charts como array vazio []."""

SUSTAINABILITY_PROMPT = """Gere um breve relatório narrado de sustentabilidade para o gerente da cafeteria baseado nos seguintes dados de consumo: {data}.
Identifique anomalias e dê recomendações práticas.

Retorne um JSON com a seguinte estrutura:
{{
  "text": "Relatório completo em Markdown",
  "charts": [
    {{
      "type": "bar ou line ou pie ou area",
      "title": "Título do gráfico",
      "data": [{{"name": "Categoria", "value": 10}}]
    }}
  ]
}}

Gere gráficos relevantes como:
- Consumo atual vs meta (bar chart)
- Distribuição de resíduos (pie chart)
- Tendência de consumo energético (line ou area chart)"""

DASHBOARD_PROMPT = """Você é o assistente de IA da cafeteria "CloudCoffee". Analise os dados atuais da loja e gere insights acionáveis para o gerente.

Dados atuais: {stats}

Retorne um JSON com a seguinte estrutura:
{{
  "text": "Resumo geral dos insights em Markdown (2-3 parágrafos curtos)",
  "insights": [
    {{
      "type": "opportunity ou alert ou info",
      "title": "Título curto",
      "description": "Descrição detalhada da oportunidade ou alerta"
    }}
  ],
  "charts": [
    {{
      "type": "bar ou line ou pie ou area",
      "title": "Título do gráfico",
      "data": [{{"name": "Categoria", "value": 10}}]
    }}
  ]
}}

Gere 2-3 insights relevantes e 2-3 gráficos úteis como:
- Distribuição de vendas por período (bar chart)
- Fluxo de clientes (line chart)
- Mix de produtos (pie chart)"""

# Used when the dashboard asks for insights without live figures
SAMPLE_DASHBOARD_STATS = {
    "vendas": "R$ 4.250,00",
    "clientes": 142,
    "tempoEspera": "4m 20s",
    "consumoEnergia": "12.4 kWh",
    "fila": "5 pessoas",
    "estoque": "Pão de queijo baixo (2 unidades)",
    "clima": "18°C, nublado",
}

NO_ANALYSIS_SUMMARY = (
    "A IA não conseguiu analisar a imagem. Verifique se a imagem é clara "
    "ou se houve um bloqueio de segurança."
)
UNPARSABLE_ANALYSIS_SUMMARY = "Erro ao processar a resposta da IA."
NO_CANDIDATES_ERROR = "No candidates returned"
NO_IMAGE_ERROR = "No image data in response"
