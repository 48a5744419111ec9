from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

DASHBOARD_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>ALB Demo Dashboard</title>
  <meta charset="utf-8">
  <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
  <style>
    body {
      background: linear-gradient(135deg, #020024, #090979, #00d4ff);
      font-family: 'Segoe UI', sans-serif;
      color: #fff;
      padding: 30px;
    }
    h1 { text-shadow: 0 0 15px #00eaff }
    .grid {
      display: grid;
      grid-template-columns: repeat(auto-fit, minmax(260px, 1fr));
      gap: 20px;
    }
    .card {
      background: rgba(0,0,0,0.45);
      border-radius: 16px;
      padding: 20px;
      box-shadow: 0 0 25px rgba(0,234,255,0.3);
      backdrop-filter: blur(8px);
    }
    canvas { max-height: 220px }
    .big { font-size: 1.3em; color: #00f7ff; }
    .error { color: #ff6b6b; font-weight: bold; }
  </style>
</head>
<body>

<h1>Application Load Balancer Demo</h1>
<div class="error" id="error"></div>

<div class="grid">
  <div class="card">
    <h2>Request Served By</h2>
    <div class="big" id="servedIp">-</div>
    <div id="hostname">-</div>
  </div>

  <div class="card">
    <h2>AWS Region</h2>
    <div class="big" id="region">-</div>
    <div>EC2: <span id="ec2"></span></div>
    <div>S3: <span id="s3"></span></div>
    <div>RDS: <span id="rds"></span></div>
  </div>
</div>

<br>

<div class="grid">
  <div class="card">
    <h3>Local CPU Usage</h3>
    <canvas id="cpuChart"></canvas>
  </div>

  <div class="card">
    <h3>Local RAM Usage</h3>
    <canvas id="ramChart"></canvas>
  </div>
</div>

<script>
function usageChart(id, used) {
  new Chart(document.getElementById(id), {
    type: 'doughnut',
    data: {
      labels: ['Used', 'Free'],
      datasets: [{ data: [used, 100 - used] }]
    }
  });
}

fetch('/api/stats')
  .then(r => r.json())
  .then(d => {
    if (d.error) {
      document.getElementById('error').innerText = d.error;
      return;
    }
    document.getElementById('servedIp').innerText = d.servedByIp;
    document.getElementById('hostname').innerText = d.hostname;
    document.getElementById('region').innerText = d.region;
    document.getElementById('ec2').innerText = d.ec2Count;
    document.getElementById('s3').innerText = d.s3Count;
    document.getElementById('rds').innerText = d.rdsCount;

    usageChart('cpuChart', parseFloat(d.localCpu));
    usageChart('ramChart', parseFloat(d.localRam));
  });
</script>

</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, summary="Dashboard page")
async def dashboard() -> HTMLResponse:
    """Static page that fetches /api/stats and renders it with Chart.js."""
    return HTMLResponse(DASHBOARD_HTML)
